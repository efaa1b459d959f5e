# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null)
- name: text (not null)
- slug: text (not null, from rpc generate_project_slug(project_name, user_id_param))
- description: text (nullable)
- repository_url: text (nullable) - browsable repository page
- source_url: text (nullable) - clone URL
- branch: text (not null, default: 'main')
- root_directory: text (nullable)
- build_command: text (nullable, default: 'npm run build')
- output_directory: text (nullable, default: 'dist')
- auto_deploy: text (not null, default: 'commit') - values: commit, pr, disabled
- environment_variables: jsonb (default: '[]') - list of {key, value}
- domain: text (nullable) - host the project is served on
- status: text (not null, default: 'pending') - values: pending, building, deployed, failed, inactive
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Supabase table: notifications
- id: uuid (primary key)
- user_id: uuid (not null)
- type: text (not null) - e.g. project_created
- title: text (not null)
- message: text (not null)
- project_id: uuid (nullable, foreign key to projects.id)
"""
