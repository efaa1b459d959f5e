import re
from app.modules.wizard.schemas import SourceCodeData, ProjectDetailsData, ValidationResult

PUBLIC_REPO_URL_PATTERN = re.compile(r"^https://(github\.com|gitlab\.com|bitbucket\.org)/.+/.+")
PROJECT_NAME_MAX_LENGTH = 50


def is_valid_public_repo_url(url: str) -> bool:
    return bool(PUBLIC_REPO_URL_PATTERN.match(url or ""))


def repo_name_from_url(url: str) -> str:
    """Last path segment of a repository URL without the .git suffix."""
    name = url.rstrip("/").split("/")[-1]
    if name.endswith(".git"):
        name = name[:-len(".git")]
    return name


def validate_public_repo_url(url: str) -> ValidationResult:
    result = ValidationResult()
    if not url or not url.strip():
        result.add("public_repo_url", "Please enter a repository URL")
    elif not is_valid_public_repo_url(url):
        result.add("public_repo_url", "Please enter a valid GitHub, GitLab, or Bitbucket URL")
    return result


def validate_source_code(data: SourceCodeData) -> ValidationResult:
    """Step 1: a source must be chosen and the matching field filled in."""
    result = ValidationResult()
    if data.type is None:
        result.add("type", "Select a Git provider or a public repository")
    elif data.type == "public":
        url_result = validate_public_repo_url(data.public_repo_url)
        result.errors.extend(url_result.errors)
        result.ok = result.ok and url_result.ok
    elif data.github_repo is None:
        result.add("github_repo", "Select a repository")
    return result


def validate_project_details(data: ProjectDetailsData) -> ValidationResult:
    """Step 2 form rules."""
    result = ValidationResult()
    if not data.project_name:
        result.add("project_name", "Project name is required")
    elif len(data.project_name) > PROJECT_NAME_MAX_LENGTH:
        result.add("project_name", f"Project name must be less than {PROJECT_NAME_MAX_LENGTH} characters")
    if not data.branch:
        result.add("branch", "Branch is required")
    if not data.build_command:
        result.add("build_command", "Build command is required")
    return result
