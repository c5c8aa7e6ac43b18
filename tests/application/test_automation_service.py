"""
Test suite for AutomationService.

Uses a mocked ApplyApiClient; polling runs on the event loop clock with
a short interval.

System role: Verification of run start and tracking orchestration
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from apply_progress.application.services.automation_service import AutomationService
from apply_progress.configs.poller import PollerSettings
from apply_progress.core.exceptions import ProgressFetchError, RunNotFoundError
from apply_progress.core.poller import PollerState
from apply_progress.models.progress import RunStatus
from apply_progress.models.run import StartRunResponse


@pytest.fixture
def fast_settings() -> PollerSettings:
    return PollerSettings(interval_seconds=0.01, close_delay_seconds=0.01)


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.start_automation = AsyncMock(
        return_value=StartRunResponse(run_id="run-1", message="Automation started")
    )
    client.regenerate_sources = AsyncMock(return_value="Sources regenerated successfully")
    client.fetch_progress = AsyncMock()
    return client


@pytest.mark.asyncio
async def test_start_run(mock_client, fast_settings):
    service = AutomationService(mock_client, fast_settings)
    response = await service.start_run()

    assert response.run_id == "run-1"
    mock_client.start_automation.assert_awaited_once()


@pytest.mark.asyncio
async def test_regenerate_sources(mock_client, fast_settings):
    service = AutomationService(mock_client, fast_settings)
    assert await service.regenerate_sources() == "Sources regenerated successfully"


def test_create_poller_uses_settings(mock_client, fake_clock):
    settings = PollerSettings(interval_seconds=2.0, close_delay_seconds=5.0)
    service = AutomationService(mock_client, settings, clock=fake_clock)

    poller = service.create_poller("run-1")

    assert poller.run_id == "run-1"
    assert poller.state is PollerState.IDLE
    assert poller._poll_timer._interval == 2.0
    assert poller._close_timer._delay == 5.0


@pytest.mark.asyncio
async def test_watch_until_completed(mock_client, fast_settings, make_snapshot):
    mock_client.fetch_progress.side_effect = [
        RunNotFoundError("run-1"),
        make_snapshot("fetching", progress=10),
        make_snapshot("applying", progress=60),
        make_snapshot("completed", progress=100),
    ]
    updates = []
    service = AutomationService(mock_client, fast_settings)

    final = await service.watch("run-1", on_update=updates.append)

    assert final.status is RunStatus.COMPLETED
    assert [s.status for s in updates] == [RunStatus.FETCHING, RunStatus.APPLYING, RunStatus.COMPLETED]
    assert mock_client.fetch_progress.await_count == 4


@pytest.mark.asyncio
async def test_watch_returns_error_snapshot(mock_client, fast_settings):
    mock_client.fetch_progress.side_effect = ProgressFetchError("HTTP 500", status_code=500)
    service = AutomationService(mock_client, fast_settings)

    final = await service.watch("run-1")

    assert final.status is RunStatus.ERROR
    assert final.current_step == "Error fetching progress"
