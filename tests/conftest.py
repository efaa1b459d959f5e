import pytest

from app.config import settings
from app.modules.wizard import registry
from app.modules.wizard.store import WizardStore


@pytest.fixture(autouse=True)
def _clear_registry():
    yield
    registry.clear()


@pytest.fixture
def fast_deploys(monkeypatch):
    """Run the simulated deployment without real delays."""
    monkeypatch.setattr(settings, "deploy_min_delay", 0.0)
    monkeypatch.setattr(settings, "deploy_max_delay", 0.0)
    monkeypatch.setattr(settings, "deploy_completion_delay", 0.0)
    monkeypatch.setattr(settings, "deploy_base_domain", "shipstra.app")


@pytest.fixture
def store() -> WizardStore:
    return WizardStore()


@pytest.fixture
def github_repo_payload() -> dict:
    return {
        "id": 42,
        "name": "my-app",
        "full_name": "octo/my-app",
        "owner": "octo",
        "default_branch": "develop",
        "clone_url": "https://github.com/octo/my-app.git",
        "html_url": "https://github.com/octo/my-app",
    }
