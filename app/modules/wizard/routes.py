from fastapi import APIRouter, Depends, HTTPException, Path
from app.modules.wizard import registry
from app.modules.wizard.controller import WizardController
from app.modules.wizard.schemas import (
    WizardResponse, DeploymentLogsResponse, GithubRepo, PublicRepoConnect,
    SourceCodeUpdate, ProjectDetailsUpdate, DeploymentUpdate,
    EnvironmentVariableUpdate, EnvImportRequest, DeploymentFailRequest,
    ValidationResult,
)
from app.modules.projects.schemas import ProjectResponse
from app.modules.projects.service import ProjectService
from app.modules.projects.routes import get_project_service
from app.core.dependencies import get_current_user_id, get_wizard
from typing import Dict
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wizards", tags=["wizards"])


def _to_response(wizard: WizardController) -> WizardResponse:
    return WizardResponse(
        id=wizard.id,
        state=wizard.state,
        can_go_to_next_step=wizard.can_go_to_next_step(),
        can_go_to_prev_step=wizard.can_go_to_prev_step(),
        steps=wizard.step_statuses(),
        created_at=wizard.created_at,
    )


def _raise_if_invalid(result: ValidationResult) -> None:
    if not result.ok:
        raise HTTPException(status_code=422, detail=[e.model_dump() for e in result.errors])


@router.post("", response_model=WizardResponse, status_code=201)
async def create_wizard():
    """Open a new create-project wizard at step 1 with default values"""
    try:
        wizard = registry.create()
    except registry.RegistryFullError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=503, detail="Too many wizards in progress, try again later")
    return _to_response(wizard)


@router.get("/{wizard_id}", response_model=WizardResponse)
async def get_wizard_state(wizard: WizardController = Depends(get_wizard)):
    return _to_response(wizard)


@router.delete("/{wizard_id}", status_code=204)
async def close_wizard(wizard: WizardController = Depends(get_wizard)):
    """Close the wizard and stop any simulated deployment still running"""
    registry.remove(wizard.id)
    return None


# Navigation

@router.post("/{wizard_id}/next", response_model=WizardResponse)
async def next_step(wizard: WizardController = Depends(get_wizard)):
    """Advance one step. Clients should check can_go_to_next_step first."""
    wizard.go_to_next_step()
    return _to_response(wizard)


@router.post("/{wizard_id}/prev", response_model=WizardResponse)
async def prev_step(wizard: WizardController = Depends(get_wizard)):
    wizard.go_to_prev_step()
    return _to_response(wizard)


@router.post("/{wizard_id}/step/{step}", response_model=WizardResponse)
async def go_to_step(
    step: int = Path(..., ge=1, le=3),
    wizard: WizardController = Depends(get_wizard)
):
    wizard.go_to_step(step)
    return _to_response(wizard)


@router.get("/{wizard_id}/validation", response_model=ValidationResult)
async def validate_current_step(wizard: WizardController = Depends(get_wizard)):
    return wizard.validate_current_step()


@router.post("/{wizard_id}/reset", response_model=WizardResponse)
async def reset_wizard(wizard: WizardController = Depends(get_wizard)):
    wizard.reset_wizard()
    return _to_response(wizard)


# Partial updates

@router.patch("/{wizard_id}/source-code", response_model=WizardResponse)
async def update_source_code(data: SourceCodeUpdate, wizard: WizardController = Depends(get_wizard)):
    wizard.update_source_code_data(data)
    return _to_response(wizard)


@router.patch("/{wizard_id}/project-details", response_model=WizardResponse)
async def update_project_details(data: ProjectDetailsUpdate, wizard: WizardController = Depends(get_wizard)):
    wizard.update_project_details_data(data)
    return _to_response(wizard)


@router.patch("/{wizard_id}/deployment", response_model=WizardResponse)
async def update_deployment(data: DeploymentUpdate, wizard: WizardController = Depends(get_wizard)):
    wizard.update_deployment_data(data)
    return _to_response(wizard)


# Step 1: source code

@router.post("/{wizard_id}/source-code/github", response_model=WizardResponse)
async def select_github_repo(repo: GithubRepo, wizard: WizardController = Depends(get_wizard)):
    """Use a repository from the connected GitHub installation; pre-fills the project name"""
    wizard.select_github_repo(repo)
    return _to_response(wizard)


@router.post("/{wizard_id}/source-code/public", response_model=WizardResponse)
async def connect_public_repo(data: PublicRepoConnect, wizard: WizardController = Depends(get_wizard)):
    """Connect a public GitHub, GitLab or Bitbucket repository by URL"""
    _raise_if_invalid(wizard.connect_public_repo(data.url))
    return _to_response(wizard)


# Step 2: project details

@router.post("/{wizard_id}/project-details/submit", response_model=WizardResponse)
async def submit_project_details(data: ProjectDetailsUpdate, wizard: WizardController = Depends(get_wizard)):
    """Validate the details form, save it and move to the deployment step"""
    _raise_if_invalid(wizard.submit_project_details(data))
    return _to_response(wizard)


@router.post("/{wizard_id}/env-vars", response_model=WizardResponse)
async def add_environment_variable(wizard: WizardController = Depends(get_wizard)):
    wizard.add_environment_variable()
    return _to_response(wizard)


@router.put("/{wizard_id}/env-vars/{index}", response_model=WizardResponse)
async def update_environment_variable(
    index: int,
    data: EnvironmentVariableUpdate,
    wizard: WizardController = Depends(get_wizard)
):
    """Replace one variable. Unknown indices leave the list unchanged."""
    wizard.update_environment_variable(index, data.key, data.value)
    return _to_response(wizard)


@router.delete("/{wizard_id}/env-vars/{index}", response_model=WizardResponse)
async def remove_environment_variable(index: int, wizard: WizardController = Depends(get_wizard)):
    wizard.remove_environment_variable(index)
    return _to_response(wizard)


@router.post("/{wizard_id}/env-vars/import", response_model=WizardResponse)
async def import_environment_variables(data: EnvImportRequest, wizard: WizardController = Depends(get_wizard)):
    """Replace all variables with the contents of a pasted .env file"""
    if data.content.strip():
        wizard.import_from_env(data.content)
    return _to_response(wizard)


# Step 3: deployment

@router.post("/{wizard_id}/deployment/start", response_model=WizardResponse)
async def start_deployment(wizard: WizardController = Depends(get_wizard)):
    """Start the simulated deployment. Calling it again while a run exists is a no-op."""
    if wizard.state.current_step != 3:
        raise HTTPException(status_code=409, detail="Deployment can only start from the deployment step")
    wizard.start_deployment()
    return _to_response(wizard)


@router.post("/{wizard_id}/deployment/retry", response_model=WizardResponse)
async def retry_deployment(wizard: WizardController = Depends(get_wizard)):
    try:
        wizard.retry_deployment()
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _to_response(wizard)


@router.post("/{wizard_id}/deployment/fail", response_model=WizardResponse)
async def fail_deployment(data: DeploymentFailRequest, wizard: WizardController = Depends(get_wizard)):
    """Report a failure detected outside the simulated run"""
    try:
        wizard.fail_deployment(data.error)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _to_response(wizard)


@router.get("/{wizard_id}/deployment/logs", response_model=DeploymentLogsResponse)
async def get_deployment_logs(wizard: WizardController = Depends(get_wizard)):
    """
    Poll for deployment logs.
    Returns current logs, status and build progress.
    """
    deployment = wizard.state.deployment
    return DeploymentLogsResponse(
        wizard_id=wizard.id,
        logs=deployment.logs,
        status=deployment.status,
        progress=wizard.runner.progress,
        duration_seconds=wizard.deployment_duration(),
        deployed_url=deployment.deployed_url,
        error=deployment.error,
        has_more=deployment.status == "building",
    )


# Finalize

@router.post("/{wizard_id}/project", response_model=ProjectResponse, status_code=201)
async def create_project(
    wizard: WizardController = Depends(get_wizard),
    user_data: Dict = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service)
):
    """Persist the wizard's source and project details as a project owned by the current user"""
    return service.create_project_from_wizard(wizard.state, user_data["id"])
