"""Tests for the simulated deploy runner."""

import asyncio
from datetime import datetime, timezone

import pytest

from app.modules.wizard.deploy_runner import BUILD_SCRIPT, DeployRunner, deployed_url_for
from app.modules.wizard.store import WizardStore


class RecordingRng:
    """Stands in for random.Random: records the requested range, returns no delay."""

    def __init__(self):
        self.calls = []

    def uniform(self, a, b):
        self.calls.append((a, b))
        return 0.0


def _runner(store: WizardStore, **kwargs) -> DeployRunner:
    options = {"min_delay": 0.0, "max_delay": 0.0, "completion_delay": 0.0, "base_domain": "shipstra.app"}
    options.update(kwargs)
    return DeployRunner(store, **options)


@pytest.fixture
def named_store(store: WizardStore) -> WizardStore:
    store.update_project_details_data({"project_name": "my-app"})
    return store


@pytest.mark.asyncio
async def test_start_clears_logs_before_first_line(named_store: WizardStore) -> None:
    named_store.update_deployment_data({"logs": ["stale"]})
    runner = _runner(named_store)

    deployment = runner.start()

    assert deployment.status == "building"
    assert deployment.logs == []
    assert deployment.start_time is not None
    await runner.wait()


@pytest.mark.asyncio
async def test_run_to_completion(named_store: WizardStore) -> None:
    runner = _runner(named_store)
    runner.start()

    deployment = await runner.wait()

    assert deployment.logs == list(BUILD_SCRIPT)
    assert deployment.status == "success"
    assert deployment.deployed_url == "https://my-app.shipstra.app"
    assert deployment.deployed_url.endswith("my-app.shipstra.app")
    assert deployment.end_time is not None
    assert runner.progress == 100.0
    assert not runner.is_running


@pytest.mark.asyncio
async def test_delay_is_drawn_per_line_within_bounds(named_store: WizardStore) -> None:
    rng = RecordingRng()
    runner = _runner(named_store, min_delay=0.5, max_delay=1.5, rng=rng)
    runner.start()
    await runner.wait()

    assert rng.calls == [(0.5, 1.5)] * len(BUILD_SCRIPT)


@pytest.mark.asyncio
async def test_logs_are_appended_in_order_while_building(named_store: WizardStore) -> None:
    runner = _runner(named_store, min_delay=0.01, max_delay=0.01)
    runner.start()
    seen = []
    while runner.is_running:
        logs = list(named_store.state.deployment.logs)
        assert logs == list(BUILD_SCRIPT[:len(logs)])
        seen.append(len(logs))
        await asyncio.sleep(0.005)

    assert seen == sorted(seen)
    assert named_store.state.deployment.status == "success"


@pytest.mark.asyncio
async def test_restart_supersedes_previous_chain(named_store: WizardStore) -> None:
    runner = _runner(named_store, min_delay=0.005, max_delay=0.005)
    runner.start()
    await asyncio.sleep(0.02)
    runner.start()

    deployment = await runner.wait()

    assert deployment.logs == list(BUILD_SCRIPT)
    assert deployment.status == "success"


@pytest.mark.asyncio
async def test_cancel_stops_appending(named_store: WizardStore) -> None:
    runner = _runner(named_store, min_delay=0.01, max_delay=0.01)
    runner.start()
    await asyncio.sleep(0.035)
    runner.cancel()
    count = len(named_store.state.deployment.logs)

    await asyncio.sleep(0.05)

    assert len(named_store.state.deployment.logs) == count
    assert count < len(BUILD_SCRIPT)
    assert named_store.state.deployment.status == "building"
    assert not runner.is_running


@pytest.mark.asyncio
async def test_fail_then_retry(named_store: WizardStore) -> None:
    runner = _runner(named_store, min_delay=0.01, max_delay=0.01)
    runner.start()
    await asyncio.sleep(0.025)

    failed = runner.fail("Build container crashed")
    assert failed.status == "failed"
    assert failed.error == "Build container crashed"
    assert failed.end_time is not None
    await runner.wait()
    assert named_store.state.deployment.status == "failed"

    retried = runner.retry()
    assert retried.status == "building"
    assert retried.logs == []
    assert retried.error is None
    assert retried.end_time is None

    deployment = await runner.wait()
    assert deployment.status == "success"
    assert deployment.logs == list(BUILD_SCRIPT)


@pytest.mark.asyncio
async def test_external_failure_stops_the_script(named_store: WizardStore) -> None:
    runner = _runner(named_store, min_delay=0.01, max_delay=0.01)
    runner.start()
    await asyncio.sleep(0.025)
    named_store.update_deployment_data({"status": "failed", "error": "detected elsewhere"})

    await runner.wait()

    assert named_store.state.deployment.status == "failed"
    assert named_store.state.deployment.deployed_url is None
    assert len(named_store.state.deployment.logs) < len(BUILD_SCRIPT)


@pytest.mark.asyncio
async def test_retry_requires_failed_status(named_store: WizardStore) -> None:
    runner = _runner(named_store)
    with pytest.raises(ValueError):
        runner.retry()
    runner.start()
    await runner.wait()
    with pytest.raises(ValueError):
        runner.retry()


def test_fail_requires_building(named_store: WizardStore) -> None:
    runner = _runner(named_store)
    with pytest.raises(ValueError):
        runner.fail("boom")


def test_start_needs_running_loop(named_store: WizardStore) -> None:
    runner = _runner(named_store)
    with pytest.raises(RuntimeError):
        runner.start()
    assert named_store.state.deployment.status == "idle"


def test_invalid_delay_range(store: WizardStore) -> None:
    with pytest.raises(ValueError):
        DeployRunner(store, min_delay=2.0, max_delay=1.0)


@pytest.mark.asyncio
async def test_uses_injected_clock(named_store: WizardStore) -> None:
    fixed = datetime(2026, 1, 1, tzinfo=timezone.utc)
    runner = _runner(named_store, clock=lambda: fixed)
    runner.start()
    deployment = await runner.wait()
    assert deployment.start_time == fixed
    assert deployment.end_time == fixed


def test_deployed_url_for() -> None:
    assert deployed_url_for("blog", "example.dev") == "https://blog.example.dev"
