from app.modules.wizard.schemas import (
    WizardState, SourceCodeData, ProjectDetailsData, DeploymentData,
    SourceCodeUpdate, ProjectDetailsUpdate, DeploymentUpdate,
)
from pydantic import BaseModel
from typing import Type, TypeVar, Union, Dict, Any
import logging

logger = logging.getLogger(__name__)

_Record = TypeVar("_Record", bound=BaseModel)


def _merge(current: _Record, partial: BaseModel, record_cls: Type[_Record]) -> _Record:
    """Shallow merge: fields the caller set replace the current ones wholesale, the rest are kept."""
    merged = current.model_dump()
    merged.update(partial.model_dump(exclude_unset=True))
    return record_cls(**merged)


class WizardStore:
    """Holds one in-progress WizardState. Never talks to storage."""

    def __init__(self, state: WizardState = None):
        self.state = state or WizardState()

    def update_source_code_data(self, partial: Union[SourceCodeUpdate, Dict[str, Any]]) -> SourceCodeData:
        if isinstance(partial, dict):
            partial = SourceCodeUpdate(**partial)
        self.state.source_code = _merge(self.state.source_code, partial, SourceCodeData)
        return self.state.source_code

    def update_project_details_data(self, partial: Union[ProjectDetailsUpdate, Dict[str, Any]]) -> ProjectDetailsData:
        if isinstance(partial, dict):
            partial = ProjectDetailsUpdate(**partial)
        self.state.project_details = _merge(self.state.project_details, partial, ProjectDetailsData)
        return self.state.project_details

    def update_deployment_data(self, partial: Union[DeploymentUpdate, Dict[str, Any]]) -> DeploymentData:
        if isinstance(partial, dict):
            partial = DeploymentUpdate(**partial)
        self.state.deployment = _merge(self.state.deployment, partial, DeploymentData)
        return self.state.deployment

    def reset_wizard(self) -> WizardState:
        self.state = WizardState()
        logger.debug("Wizard state reset to defaults")
        return self.state
