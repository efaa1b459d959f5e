"""Step navigation for the create-project wizard.

Plain functions over a WizardState. They only move ``current_step``; field-level
checks live in ``validators``.
"""
from app.modules.wizard.schemas import WizardState, StepStatus

FIRST_STEP = 1
LAST_STEP = 3


def go_to_next_step(state: WizardState) -> int:
    state.current_step = min(state.current_step + 1, LAST_STEP)
    return state.current_step


def go_to_prev_step(state: WizardState) -> int:
    state.current_step = max(state.current_step - 1, FIRST_STEP)
    return state.current_step


def go_to_step(state: WizardState, step: int) -> int:
    """Jump straight to ``step``. Business rules are the caller's concern."""
    if step < FIRST_STEP or step > LAST_STEP:
        raise ValueError(f"Step must be between {FIRST_STEP} and {LAST_STEP}, got {step}")
    state.current_step = step
    return state.current_step


def can_go_to_next_step(state: WizardState) -> bool:
    if state.current_step == 1:
        source = state.source_code
        if source.type is None:
            return False
        if source.type == "public":
            return bool(source.public_repo_url)
        return source.github_repo is not None
    if state.current_step == 2:
        details = state.project_details
        return bool(details.project_name) and bool(details.branch)
    # Deployment is the last step
    return False


def can_go_to_prev_step(state: WizardState) -> bool:
    return state.current_step > FIRST_STEP


def step_status(state: WizardState, step: int) -> StepStatus:
    if step < state.current_step:
        return "completed"
    if step == state.current_step:
        return "active"
    return "pending"
