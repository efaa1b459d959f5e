import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union, Any

from app.modules.wizard import navigator, env_vars, validators
from app.modules.wizard.branches import BranchFetcher, load_branches
from app.modules.wizard.deploy_runner import DeployRunner
from app.modules.wizard.schemas import (
    WizardState, SourceCodeData, ProjectDetailsData, DeploymentData, GithubRepo,
    EnvironmentVariable, SourceCodeUpdate, ProjectDetailsUpdate, DeploymentUpdate,
    ValidationResult, StepStatus,
)
from app.modules.wizard.store import WizardStore

logger = logging.getLogger(__name__)


class WizardController:
    """One create-project wizard: store, navigation, env editor and deploy runner behind a single object."""

    def __init__(self, wizard_id: str, runner_factory=DeployRunner):
        self.id = wizard_id
        self.created_at = datetime.now(timezone.utc)
        self.store = WizardStore()
        self.runner = runner_factory(self.store)

    @property
    def state(self) -> WizardState:
        return self.store.state

    # Navigation

    def go_to_next_step(self) -> int:
        return navigator.go_to_next_step(self.state)

    def go_to_prev_step(self) -> int:
        return navigator.go_to_prev_step(self.state)

    def go_to_step(self, step: int) -> int:
        return navigator.go_to_step(self.state, step)

    def can_go_to_next_step(self) -> bool:
        return navigator.can_go_to_next_step(self.state)

    def can_go_to_prev_step(self) -> bool:
        return navigator.can_go_to_prev_step(self.state)

    def step_statuses(self) -> Dict[int, StepStatus]:
        return {step: navigator.step_status(self.state, step)
                for step in range(navigator.FIRST_STEP, navigator.LAST_STEP + 1)}

    def validate_current_step(self) -> ValidationResult:
        """Field-level check of the active step's form; the deployment step has no form."""
        if self.state.current_step == 1:
            return validators.validate_source_code(self.state.source_code)
        if self.state.current_step == 2:
            return validators.validate_project_details(self.state.project_details)
        return ValidationResult()

    def reset_wizard(self) -> WizardState:
        self.runner.reset()
        return self.store.reset_wizard()

    # Data updates

    def update_source_code_data(self, partial: Union[SourceCodeUpdate, Dict[str, Any]]) -> SourceCodeData:
        return self.store.update_source_code_data(partial)

    def update_project_details_data(self, partial: Union[ProjectDetailsUpdate, Dict[str, Any]]) -> ProjectDetailsData:
        return self.store.update_project_details_data(partial)

    def update_deployment_data(self, partial: Union[DeploymentUpdate, Dict[str, Any]]) -> DeploymentData:
        return self.store.update_deployment_data(partial)

    # Step 1

    def select_github_repo(self, repo: GithubRepo) -> SourceCodeData:
        source = self.store.update_source_code_data(
            SourceCodeUpdate(type="github", github_repo=repo, public_repo_url=None)
        )
        self.store.update_project_details_data({"project_name": repo.name})
        return source

    def connect_public_repo(self, url: str) -> ValidationResult:
        """Validate and select a public repository. State is left untouched when the URL is rejected."""
        result = validators.validate_public_repo_url(url)
        if not result.ok:
            return result
        self.store.update_source_code_data(
            SourceCodeUpdate(type="public", public_repo_url=url, github_repo=None)
        )
        self.store.update_project_details_data({"project_name": validators.repo_name_from_url(url)})
        return result

    # Step 2

    async def load_branches(self, fetch_branches: BranchFetcher) -> List[str]:
        return await load_branches(self.store, fetch_branches)

    def submit_project_details(self, partial: Union[ProjectDetailsUpdate, Dict[str, Any]]) -> ValidationResult:
        """Validate the merged details and move on to the deployment step when they pass."""
        if isinstance(partial, dict):
            partial = ProjectDetailsUpdate(**partial)
        merged = ProjectDetailsData(**{
            **self.state.project_details.model_dump(),
            **partial.model_dump(exclude_unset=True),
        })
        result = validators.validate_project_details(merged)
        if not result.ok:
            return result
        self.store.update_project_details_data(partial)
        self.go_to_next_step()
        return result

    def add_environment_variable(self) -> List[EnvironmentVariable]:
        return env_vars.add_environment_variable(self.store)

    def update_environment_variable(self, index: int, key: str, value: str) -> List[EnvironmentVariable]:
        return env_vars.update_environment_variable(self.store, index, key, value)

    def remove_environment_variable(self, index: int) -> List[EnvironmentVariable]:
        return env_vars.remove_environment_variable(self.store, index)

    def import_from_env(self, content: str) -> List[EnvironmentVariable]:
        return env_vars.import_from_env(self.store, content)

    # Step 3

    def start_deployment(self) -> DeploymentData:
        """Kick off the simulated run once; later calls leave a started run alone."""
        if self.state.deployment.status != "idle":
            return self.state.deployment
        return self.runner.start()

    def retry_deployment(self) -> DeploymentData:
        return self.runner.retry()

    def fail_deployment(self, error: str) -> DeploymentData:
        return self.runner.fail(error)

    def deployment_duration(self, now: Optional[datetime] = None) -> Optional[int]:
        deployment = self.state.deployment
        if deployment.start_time is None:
            return None
        end = deployment.end_time or now or datetime.now(timezone.utc)
        return round((end - deployment.start_time).total_seconds())

    def close(self) -> None:
        self.runner.cancel()
        logger.debug(f"Wizard {self.id} closed")
