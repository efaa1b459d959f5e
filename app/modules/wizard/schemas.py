from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Literal, Dict
from datetime import datetime

WizardStep = Literal[1, 2, 3]
SourceType = Literal["github", "public"]
AutoDeploy = Literal["commit", "pr", "disabled"]
DeploymentStatus = Literal["idle", "building", "success", "failed"]
StepStatus = Literal["completed", "active", "pending"]


class GithubRepo(BaseModel):
    id: int
    name: str
    full_name: str
    owner: str
    default_branch: str
    clone_url: str
    html_url: str


class EnvironmentVariable(BaseModel):
    key: str = ""
    value: str = ""


class SourceCodeData(BaseModel):
    type: Optional[SourceType] = None
    github_repo: Optional[GithubRepo] = None
    public_repo_url: Optional[str] = None


class ProjectDetailsData(BaseModel):
    project_name: str = ""
    branch: str = "main"
    root_directory: Optional[str] = ""
    build_command: str = "npm run build"
    environment_variables: List[EnvironmentVariable] = Field(default_factory=list)
    auto_deploy: AutoDeploy = "commit"


class DeploymentData(BaseModel):
    status: DeploymentStatus = "idle"
    logs: List[str] = Field(default_factory=list)
    deployed_url: Optional[str] = None
    error: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


class WizardState(BaseModel):
    """Everything collected by the create-project wizard. Lives in memory until the project is persisted."""
    current_step: WizardStep = 1
    source_code: SourceCodeData = Field(default_factory=SourceCodeData)
    project_details: ProjectDetailsData = Field(default_factory=ProjectDetailsData)
    deployment: DeploymentData = Field(default_factory=DeploymentData)


# Partial updates: only the fields a caller actually sends are merged.


def _reject_nulls(update: BaseModel, fields) -> None:
    for name in fields:
        if name in update.model_fields_set and getattr(update, name) is None:
            raise ValueError(f"{name} cannot be null")


class SourceCodeUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Optional[SourceType] = None
    github_repo: Optional[GithubRepo] = None
    public_repo_url: Optional[str] = None


class ProjectDetailsUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    project_name: Optional[str] = None
    branch: Optional[str] = None
    root_directory: Optional[str] = None
    build_command: Optional[str] = None
    environment_variables: Optional[List[EnvironmentVariable]] = None
    auto_deploy: Optional[AutoDeploy] = None

    @model_validator(mode="after")
    def no_null_required_fields(self):
        _reject_nulls(self, ("project_name", "branch", "build_command", "environment_variables", "auto_deploy"))
        return self


class DeploymentUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: Optional[DeploymentStatus] = None
    logs: Optional[List[str]] = None
    deployed_url: Optional[str] = None
    error: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @model_validator(mode="after")
    def no_null_required_fields(self):
        _reject_nulls(self, ("status", "logs"))
        return self


class FieldError(BaseModel):
    field: str
    message: str


class ValidationResult(BaseModel):
    ok: bool = True
    errors: List[FieldError] = Field(default_factory=list)

    def add(self, field: str, message: str) -> None:
        self.errors.append(FieldError(field=field, message=message))
        self.ok = False


# Request / response bodies

class PublicRepoConnect(BaseModel):
    url: str


class EnvironmentVariableUpdate(BaseModel):
    key: str
    value: str


class EnvImportRequest(BaseModel):
    content: str


class DeploymentFailRequest(BaseModel):
    error: str = "Deployment failed. Please check the build logs for more details."


class WizardResponse(BaseModel):
    id: str
    state: WizardState
    can_go_to_next_step: bool
    can_go_to_prev_step: bool
    steps: Dict[int, StepStatus]
    created_at: datetime


class DeploymentLogsResponse(BaseModel):
    wizard_id: str
    logs: List[str]
    status: DeploymentStatus
    progress: float
    duration_seconds: Optional[int] = None
    deployed_url: Optional[str] = None
    error: Optional[str] = None
    has_more: bool = False
