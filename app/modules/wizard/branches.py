import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Union

from app.modules.wizard.store import WizardStore

logger = logging.getLogger(__name__)

# fetch_branches(owner, repo) -> [{"name": ..., ...}, ...]; sync or async
BranchFetcher = Callable[[str, str], Union[List[Dict[str, Any]], Awaitable[List[Dict[str, Any]]]]]


async def load_branches(store: WizardStore, fetch_branches: BranchFetcher) -> List[str]:
    """
    Branch choices for the project details step.

    For a GitHub source the branches come from ``fetch_branches``; when the
    selected branch is still empty or the "main" placeholder it is switched to
    the repository's default branch. If fetching fails only the default branch
    is offered.
    """
    source = store.state.source_code
    details = store.state.project_details
    if source.type != "github" or source.github_repo is None:
        return [details.branch] if details.branch else []

    repo = source.github_repo
    owner, _, name = repo.full_name.partition("/")
    try:
        result = fetch_branches(owner, name)
        if inspect.isawaitable(result):
            result = await result
        branch_names = [branch["name"] for branch in result]
    except Exception as e:
        logger.warning(f"Could not load branches for {repo.full_name}, using default branch: {e}")
        return [repo.default_branch]

    if not details.branch or details.branch == "main":
        store.update_project_details_data({"branch": repo.default_branch})
    return branch_names
