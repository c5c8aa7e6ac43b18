"""
Apply API HTTP client.

Starts automation runs and reads run progress over JSON/HTTP. Progress
bodies are validated here, so callers receive a ProgressSnapshot or one of
the classified errors.

Dependencies: httpx, tenacity, apply_progress.models
System role: Transport boundary for the progress poller
"""

import logging
from typing import Any, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from apply_progress.configs.client import ApplyClientSettings
from apply_progress.core.exceptions import (
    AutomationStartError,
    MalformedSnapshotError,
    ProgressFetchError,
    RunNotFoundError,
)
from apply_progress.models.progress import ProgressSnapshot, parse_snapshot
from apply_progress.models.run import StartRunResponse

logger = logging.getLogger(__name__)

DEFAULT_REGENERATE_MESSAGE = "Sources regenerated successfully"


class ApplyApiClient:
    """Async client for the Apply automation endpoints."""

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        timeout: float = 300.0,
        progress_path: str = "/api/apply/automation/progress",
        apply_now_path: str = "/api/apply/automation/apply-now",
        regenerate_path: str = "/api/apply/sources/regenerate",
        start_retry_attempts: int = 3,
        accept_envelope: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.progress_path = progress_path
        self.apply_now_path = apply_now_path
        self.regenerate_path = regenerate_path
        self.start_retry_attempts = start_retry_attempts
        self.accept_envelope = accept_envelope
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(
        cls,
        settings: ApplyClientSettings,
        accept_envelope: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ApplyApiClient":
        return cls(
            base_url=settings.base_url,
            access_token=settings.access_token,
            timeout=settings.timeout_seconds,
            progress_path=settings.progress_path,
            apply_now_path=settings.apply_now_path,
            regenerate_path=settings.regenerate_path,
            start_retry_attempts=settings.start_retry_attempts,
            accept_envelope=accept_envelope,
            transport=transport,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers=self.get_headers(),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ApplyApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def get_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def fetch_progress(self, run_id: str) -> ProgressSnapshot:
        """
        Read the current progress snapshot of a run.

        Not retried: the poller decides what each failure means.

        Raises:
            RunNotFoundError: 404, the run is not visible yet
            ProgressFetchError: Other HTTP status or transport error
            MalformedSnapshotError: Body is not JSON or not a valid snapshot
        """
        try:
            response = await self.client.get(self.progress_path, params={"runId": run_id})
        except httpx.RequestError as e:
            logger.error(f"Request error for GET {self.progress_path}: {e}")
            raise ProgressFetchError(f"Progress request failed: {e}", run_id=run_id) from e

        if response.status_code == 404:
            raise RunNotFoundError(run_id)
        if response.is_error:
            logger.error(
                f"HTTP error {response.status_code} for GET {self.progress_path}: {response.text[:200]}"
            )
            raise ProgressFetchError(
                f"Progress endpoint returned HTTP {response.status_code}",
                run_id=run_id,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedSnapshotError(
                "Progress response is not valid JSON",
                {"run_id": run_id, "content_type": response.headers.get("content-type")},
            ) from e

        return parse_snapshot(payload, accept_envelope=self.accept_envelope)

    async def start_automation(self) -> StartRunResponse:
        """
        Start an automation run.

        Connect and timeout errors are retried with exponential backoff.

        Raises:
            AutomationStartError: Request failed or the response carries no run_id
        """
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.start_retry_attempts),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
                reraise=True,
            ):
                with attempt:
                    body = await self._post(self.apply_now_path)
        except httpx.HTTPStatusError as e:
            raise AutomationStartError(
                _error_message(e.response, "Failed to start automation"),
                {"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            raise AutomationStartError(f"Failed to start automation: {e}") from e
        except ValueError as e:
            raise AutomationStartError("Automation start response is not valid JSON") from e

        if not isinstance(body, dict) or not body.get("run_id"):
            raise AutomationStartError(
                "Automation started without a run_id",
                {"body_type": type(body).__name__},
            )
        return StartRunResponse.model_validate(body)

    async def regenerate_sources(self) -> str:
        """Regenerate job sources and return the server message."""
        try:
            body = await self._post(self.regenerate_path)
        except httpx.HTTPStatusError as e:
            raise AutomationStartError(
                _error_message(e.response, "Failed to regenerate sources"),
                {"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            raise AutomationStartError(f"Failed to regenerate sources: {e}") from e
        except ValueError as e:
            raise AutomationStartError("Regenerate response is not valid JSON") from e

        if isinstance(body, dict) and body.get("message"):
            return body["message"]
        return DEFAULT_REGENERATE_MESSAGE

    async def _post(self, path: str, json_data: Optional[dict] = None) -> Any:
        try:
            response = await self.client.post(path, json=json_data)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"HTTP error {e.response.status_code} for POST {path}: {e.response.text[:200]}"
            )
            raise
        except httpx.RequestError as e:
            logger.error(f"Request error for POST {path}: {e}")
            raise
        if not response.content:
            return {}
        return response.json()


def _error_message(response: httpx.Response, default: str) -> str:
    """Server-provided ``error`` field, else the default message."""
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return default
