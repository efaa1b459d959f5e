from supabase import Client
from app.modules.projects.schemas import ProjectCreate, ProjectResponse
from app.modules.wizard.schemas import WizardState
from urllib.parse import urlparse
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def project_from_wizard(state: WizardState) -> ProjectCreate:
    """Map the finished wizard onto a projects row."""
    source = state.source_code
    details = state.project_details
    deployment = state.deployment

    repository_url: Optional[str] = None
    source_url: Optional[str] = None
    if source.type == "github" and source.github_repo:
        repository_url = source.github_repo.html_url
        source_url = source.github_repo.clone_url
    elif source.type == "public" and source.public_repo_url:
        repository_url = source.public_repo_url
        source_url = source.public_repo_url

    domain = None
    status = "pending"
    if deployment.status == "success" and deployment.deployed_url:
        domain = urlparse(deployment.deployed_url).hostname
        status = "deployed"
    elif deployment.status == "failed":
        status = "failed"
    elif deployment.status == "building":
        status = "building"

    return ProjectCreate(
        name=details.project_name,
        repository_url=repository_url,
        source_url=source_url,
        branch=details.branch,
        root_directory=details.root_directory or None,
        build_command=details.build_command or "npm run build",
        auto_deploy=details.auto_deploy,
        environment_variables=[var.model_dump() for var in details.environment_variables],
        domain=domain,
        status=status,
    )


class ProjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def generate_slug(self, project_name: str, user_id: str) -> str:
        result = self.supabase.rpc("generate_project_slug", {
            "project_name": project_name,
            "user_id_param": user_id,
        }).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to generate project slug")
        return result.data

    def create_project(self, project_data: ProjectCreate, user_id: str) -> ProjectResponse:
        """Create a project row and its 'project_created' notification"""
        try:
            slug = self.generate_slug(project_data.name, user_id)

            result = self.supabase.table("projects").insert({
                "user_id": user_id,
                "name": project_data.name,
                "slug": slug,
                "description": project_data.description,
                "repository_url": project_data.repository_url,
                "source_url": project_data.source_url,
                "branch": project_data.branch,
                "root_directory": project_data.root_directory,
                "build_command": project_data.build_command,
                "output_directory": project_data.output_directory,
                "auto_deploy": project_data.auto_deploy,
                "environment_variables": project_data.environment_variables,
                "domain": project_data.domain,
                "status": project_data.status,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create project")

            project = ProjectResponse(**result.data[0])
            self._notify_created(project, user_id)
            return project
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating project: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def create_project_from_wizard(self, state: WizardState, user_id: str) -> ProjectResponse:
        if state.current_step != 3:
            raise HTTPException(status_code=409, detail="Finish the project details step before creating the project")
        return self.create_project(project_from_wizard(state), user_id)

    def _notify_created(self, project: ProjectResponse, user_id: str) -> None:
        # Project row is already committed; notification errors are only logged
        try:
            self.supabase.table("notifications").insert({
                "user_id": user_id,
                "type": "project_created",
                "title": "Project Created",
                "message": f'Project "{project.name}" has been created successfully.',
                "project_id": project.id,
            }).execute()
        except Exception as e:
            logger.warning(f"Failed to create notification for project {project.id}: {e}")

    def list_projects(self, user_id: str, limit: int = 20, offset: int = 0) -> List[ProjectResponse]:
        """List the user's projects, newest first"""
        try:
            result = self.supabase.table("projects")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()

            return [ProjectResponse(**project) for project in result.data]
        except Exception as e:
            logger.error(f"Error listing projects: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))
