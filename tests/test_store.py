"""Tests for the wizard data store merges and reset."""

import pytest
from pydantic import ValidationError

from app.modules.wizard.schemas import EnvironmentVariable, ProjectDetailsUpdate
from app.modules.wizard.store import WizardStore


def test_defaults(store: WizardStore) -> None:
    state = store.state
    assert state.current_step == 1
    assert state.source_code.type is None
    assert state.project_details.project_name == ""
    assert state.project_details.branch == "main"
    assert state.project_details.build_command == "npm run build"
    assert state.project_details.environment_variables == []
    assert state.project_details.auto_deploy == "commit"
    assert state.deployment.status == "idle"
    assert state.deployment.logs == []


def test_update_merges_only_given_fields(store: WizardStore) -> None:
    store.update_project_details_data({"project_name": "my-app"})
    store.update_project_details_data(ProjectDetailsUpdate(branch="develop"))

    details = store.state.project_details
    assert details.project_name == "my-app"
    assert details.branch == "develop"
    assert details.build_command == "npm run build"


def test_update_is_visible_immediately(store: WizardStore) -> None:
    store.update_source_code_data({"type": "public", "public_repo_url": "https://gitlab.com/a/b"})
    assert store.state.source_code.type == "public"
    assert store.state.source_code.public_repo_url == "https://gitlab.com/a/b"


def test_explicit_none_clears_a_field(store: WizardStore, github_repo_payload: dict) -> None:
    store.update_source_code_data({"type": "github", "github_repo": github_repo_payload})
    store.update_source_code_data({"type": "public", "github_repo": None, "public_repo_url": "https://github.com/a/b"})

    source = store.state.source_code
    assert source.github_repo is None
    assert source.public_repo_url == "https://github.com/a/b"


def test_environment_variables_are_replaced_wholesale(store: WizardStore) -> None:
    store.update_project_details_data({"environment_variables": [{"key": "A", "value": "1"}, {"key": "B", "value": "2"}]})
    store.update_project_details_data({"environment_variables": [{"key": "C", "value": "3"}]})

    assert store.state.project_details.environment_variables == [EnvironmentVariable(key="C", value="3")]


def test_update_deployment_data(store: WizardStore) -> None:
    store.update_deployment_data({"status": "failed", "error": "boom"})
    assert store.state.deployment.status == "failed"
    assert store.state.deployment.error == "boom"
    assert store.state.deployment.logs == []


def test_unknown_fields_are_rejected(store: WizardStore) -> None:
    with pytest.raises(ValidationError):
        store.update_project_details_data({"projectName": "camel"})


def test_reset_restores_defaults(store: WizardStore) -> None:
    store.state.current_step = 3
    store.update_project_details_data({
        "build_command": "make",
        "environment_variables": [{"key": "A", "value": "1"}],
    })
    store.update_deployment_data({"status": "success", "logs": ["done"]})

    state = store.reset_wizard()

    assert state.current_step == 1
    assert state.project_details.environment_variables == []
    assert state.project_details.build_command == "npm run build"
    assert state.deployment.status == "idle"
    assert state.deployment.logs == []
    assert store.state is state
