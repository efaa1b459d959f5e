import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from app.config import settings
from app.modules.wizard.schemas import DeploymentData
from app.modules.wizard.store import WizardStore

logger = logging.getLogger(__name__)

BUILD_SCRIPT = (
    "🔧 Setting up build environment...",
    "📦 Installing dependencies...",
    "npm install",
    "✅ Dependencies installed successfully",
    "🏗️  Building project...",
    "npm run build",
    "> next build",
    "info  - Checking validity of types...",
    "info  - Creating an optimized production build...",
    "info  - Compiled successfully",
    "info  - Collecting page data...",
    "info  - Generating static pages (3/3)",
    "info  - Finalizing page optimization...",
    "✅ Build completed successfully",
    "🚀 Deploying to production...",
    "📡 Uploading build artifacts...",
    "🌐 Configuring CDN...",
    "✅ Deployment successful!",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def deployed_url_for(project_name: str, base_domain: str) -> str:
    return f"https://{project_name}.{base_domain}"


class DeployRunner:
    """
    Simulated build/deploy for the wizard's last step.

    Appends BUILD_SCRIPT to ``deployment.logs`` one line at a time with a random
    delay per line, then marks the deployment successful. The chain runs as a
    single asyncio task; starting again, cancelling or resetting discards it.
    It never fails on its own, only ``fail()`` moves it to ``failed``.
    """

    def __init__(
        self,
        store: WizardStore,
        script: Sequence[str] = BUILD_SCRIPT,
        min_delay: Optional[float] = None,
        max_delay: Optional[float] = None,
        completion_delay: Optional[float] = None,
        base_domain: Optional[str] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.script = tuple(script)
        self.min_delay = settings.deploy_min_delay if min_delay is None else min_delay
        self.max_delay = settings.deploy_max_delay if max_delay is None else max_delay
        self.completion_delay = settings.deploy_completion_delay if completion_delay is None else completion_delay
        self.base_domain = base_domain or settings.deploy_base_domain
        if self.min_delay < 0 or self.max_delay < self.min_delay:
            raise ValueError(f"Invalid delay range [{self.min_delay}, {self.max_delay}]")
        self._rng = rng or random.Random()
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._run_id = 0
        self._lines_appended = 0

    @property
    def deployment(self) -> DeploymentData:
        return self.store.state.deployment

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def progress(self) -> float:
        if not self.script:
            return 100.0
        return self._lines_appended / len(self.script) * 100

    def start(self) -> DeploymentData:
        """Begin a fresh run. Must be called from inside a running event loop."""
        loop = asyncio.get_running_loop()
        self.cancel()
        self._lines_appended = 0
        self.store.update_deployment_data({
            "status": "building",
            "logs": [],
            "error": None,
            "deployed_url": None,
            "start_time": self._clock(),
            "end_time": None,
        })
        self._task = loop.create_task(self._run(self._run_id))
        logger.info(f"Deployment run {self._run_id} started for '{self.store.state.project_details.project_name}'")
        return self.deployment

    def retry(self) -> DeploymentData:
        if self.deployment.status != "failed":
            raise ValueError(f"Only a failed deployment can be retried (status is '{self.deployment.status}')")
        return self.start()

    def fail(self, error: str) -> DeploymentData:
        """Record an externally detected failure for the current run."""
        if self.deployment.status != "building":
            raise ValueError(f"Only a building deployment can fail (status is '{self.deployment.status}')")
        self.cancel()
        self.store.update_deployment_data({
            "status": "failed",
            "error": error,
            "end_time": self._clock(),
        })
        logger.warning(f"Deployment marked as failed: {error}")
        return self.deployment

    def cancel(self) -> None:
        """Drop the current timer chain; a superseded chain never writes again."""
        self._run_id += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def reset(self) -> None:
        """Cancel and forget the last run's progress."""
        self.cancel()
        self._lines_appended = 0

    async def wait(self) -> DeploymentData:
        """Wait for the current chain to finish (or be cancelled)."""
        task = self._task
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
        return self.deployment

    def _next_delay(self) -> float:
        return self._rng.uniform(self.min_delay, self.max_delay)

    def _is_current(self, run_id: int) -> bool:
        return run_id == self._run_id and self.deployment.status == "building"

    async def _run(self, run_id: int) -> None:
        try:
            for line in self.script:
                await asyncio.sleep(self._next_delay())
                if not self._is_current(run_id):
                    return
                logs = list(self.deployment.logs)
                logs.append(line)
                self.store.update_deployment_data({"logs": logs})
                self._lines_appended += 1

            await asyncio.sleep(self.completion_delay)
            if not self._is_current(run_id):
                return
            project_name = self.store.state.project_details.project_name
            self.store.update_deployment_data({
                "status": "success",
                "deployed_url": deployed_url_for(project_name, self.base_domain),
                "end_time": self._clock(),
            })
            logger.info(f"Deployment run {run_id} completed successfully")
        except asyncio.CancelledError:
            logger.debug(f"Deployment run {run_id} cancelled")
            raise
