"""
Test suite for ApplyApiClient.

Uses httpx.MockTransport to stand in for the Apply API.

System role: Verification of the progress transport boundary
"""

import httpx
import pytest

from apply_progress.boundary.http.apply_client import ApplyApiClient
from apply_progress.configs.client import ApplyClientSettings
from apply_progress.core.exceptions import (
    AutomationStartError,
    MalformedSnapshotError,
    ProgressFetchError,
    RunNotFoundError,
)
from apply_progress.models.progress import RunStatus

BASE_URL = "http://apply.test"


def make_client(handler, **kwargs) -> ApplyApiClient:
    return ApplyApiClient(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_fetch_progress_queries_run_id():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "fetching", "progress": 12})

    async with make_client(handler, access_token="tok-123") as client:
        snapshot = await client.fetch_progress("run-1")

    assert snapshot.status is RunStatus.FETCHING
    assert snapshot.progress == 12
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/api/apply/automation/progress"
    assert request.url.params["runId"] == "run-1"
    assert request.headers["Authorization"] == "Bearer tok-123"


@pytest.mark.asyncio
async def test_no_auth_header_without_token():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"status": "running"})

    async with make_client(handler) as client:
        await client.fetch_progress("run-1")

    assert "Authorization" not in seen[0].headers


@pytest.mark.asyncio
async def test_fetch_progress_unwraps_envelope():
    def handler(request):
        return httpx.Response(200, json={"data": {"status": "matching", "progress": 50}})

    async with make_client(handler) as client:
        snapshot = await client.fetch_progress("run-1")

    assert snapshot.status is RunStatus.MATCHING


@pytest.mark.asyncio
async def test_fetch_progress_404_is_not_found():
    def handler(request):
        return httpx.Response(404, json={"error": "Run not found"})

    async with make_client(handler) as client:
        with pytest.raises(RunNotFoundError) as exc_info:
            await client.fetch_progress("run-404")

    assert exc_info.value.run_id == "run-404"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 401, 500, 503])
async def test_fetch_progress_other_status_is_fetch_error(status_code):
    def handler(request):
        return httpx.Response(status_code, text="upstream failure")

    async with make_client(handler) as client:
        with pytest.raises(ProgressFetchError) as exc_info:
            await client.fetch_progress("run-1")

    assert exc_info.value.status_code == status_code


@pytest.mark.asyncio
async def test_fetch_progress_network_error_is_fetch_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(ProgressFetchError, match="connection refused"):
            await client.fetch_progress("run-1")


@pytest.mark.asyncio
async def test_fetch_progress_non_json_body_is_malformed():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>", headers={"content-type": "text/html"})

    async with make_client(handler) as client:
        with pytest.raises(MalformedSnapshotError, match="not valid JSON") as exc_info:
            await client.fetch_progress("run-1")

    assert exc_info.value.details["content_type"] == "text/html"


@pytest.mark.asyncio
async def test_fetch_progress_non_object_json_is_malformed():
    def handler(request):
        return httpx.Response(200, json=["fetching"])

    async with make_client(handler) as client:
        with pytest.raises(MalformedSnapshotError):
            await client.fetch_progress("run-1")


@pytest.mark.asyncio
async def test_start_automation_returns_run():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"run_id": "run-7", "message": "Automation started", "queued": 3})

    async with make_client(handler) as client:
        response = await client.start_automation()

    assert response.run_id == "run-7"
    assert response.message == "Automation started"
    assert response.model_extra == {"queued": 3}
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/api/apply/automation/apply-now"


@pytest.mark.asyncio
async def test_start_automation_surfaces_server_error():
    def handler(request):
        return httpx.Response(403, json={"error": "Daily limit reached"})

    async with make_client(handler) as client:
        with pytest.raises(AutomationStartError) as exc_info:
            await client.start_automation()

    assert exc_info.value.message == "Daily limit reached"
    assert exc_info.value.details["status_code"] == 403


@pytest.mark.asyncio
async def test_start_automation_without_run_id_fails():
    def handler(request):
        return httpx.Response(200, json={"message": "nothing to do"})

    async with make_client(handler) as client:
        with pytest.raises(AutomationStartError, match="without a run_id"):
            await client.start_automation()


@pytest.mark.asyncio
async def test_start_automation_retries_connect_errors():
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"run_id": "run-8"})

    async with make_client(handler, start_retry_attempts=2) as client:
        response = await client.start_automation()

    assert response.run_id == "run-8"
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_regenerate_sources_message():
    def handler(request):
        assert request.url.path == "/api/apply/sources/regenerate"
        return httpx.Response(200, json={"message": "Regenerated 12 sources"})

    async with make_client(handler) as client:
        assert await client.regenerate_sources() == "Regenerated 12 sources"


@pytest.mark.asyncio
async def test_regenerate_sources_default_message():
    def handler(request):
        return httpx.Response(200)

    async with make_client(handler) as client:
        assert await client.regenerate_sources() == "Sources regenerated successfully"


def test_from_settings():
    settings = ApplyClientSettings(
        base_url="http://api.example/",
        access_token="abc",
        timeout_seconds=5,
        progress_path="/progress",
    )
    client = ApplyApiClient.from_settings(settings, accept_envelope=False)

    assert client.base_url == "http://api.example"
    assert client.timeout == 5
    assert client.progress_path == "/progress"
    assert client.accept_envelope is False
    assert client.get_headers()["Authorization"] == "Bearer abc"
