"""Environment variable editing on ``project_details.environment_variables``.

Every operation builds a new list and hands it to the store as a full
replacement, so the store's shallow merge stays the only writer.
"""
from app.modules.wizard.schemas import EnvironmentVariable
from app.modules.wizard.store import WizardStore
from typing import List


def _current(store: WizardStore) -> List[EnvironmentVariable]:
    return list(store.state.project_details.environment_variables)


def add_environment_variable(store: WizardStore) -> List[EnvironmentVariable]:
    env_vars = _current(store)
    env_vars.append(EnvironmentVariable(key="", value=""))
    return store.update_project_details_data({"environment_variables": env_vars}).environment_variables


def update_environment_variable(store: WizardStore, index: int, key: str, value: str) -> List[EnvironmentVariable]:
    """Replace the entry at ``index``. Out-of-range indices are ignored."""
    env_vars = _current(store)
    if not 0 <= index < len(env_vars):
        return env_vars
    env_vars[index] = EnvironmentVariable(key=key, value=value)
    return store.update_project_details_data({"environment_variables": env_vars}).environment_variables


def remove_environment_variable(store: WizardStore, index: int) -> List[EnvironmentVariable]:
    env_vars = _current(store)
    if not 0 <= index < len(env_vars):
        return env_vars
    del env_vars[index]
    return store.update_project_details_data({"environment_variables": env_vars}).environment_variables


def parse_env_content(content: str) -> List[EnvironmentVariable]:
    """Parse ``.env`` text: one KEY=VALUE per line, blank lines and ``#`` comments skipped."""
    env_vars = []
    for line in content.split("\n"):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if not key:
            continue
        env_vars.append(EnvironmentVariable(key=key, value=value.strip()))
    return env_vars


def import_from_env(store: WizardStore, content: str) -> List[EnvironmentVariable]:
    """Replace all environment variables with the ones parsed from ``content``."""
    env_vars = parse_env_content(content)
    return store.update_project_details_data({"environment_variables": env_vars}).environment_variables
