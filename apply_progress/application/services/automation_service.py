"""
Automation service orchestrator.

Starts automation runs through the Apply API and tracks them to a
terminal status with a ProgressPoller.

Dependencies: apply_progress.boundary.http, apply_progress.core.poller
System role: Run start and progress tracking orchestration
"""

import logging
from typing import Callable

from apply_progress.boundary.http.apply_client import ApplyApiClient
from apply_progress.configs.poller import PollerSettings
from apply_progress.core.poller import ProgressPoller
from apply_progress.core.scheduler import Clock
from apply_progress.models.progress import ProgressSnapshot
from apply_progress.models.run import StartRunResponse

logger = logging.getLogger(__name__)


class AutomationService:
    """
    Automation service orchestrator.

    Wraps ApplyApiClient for run lifecycle and builds pollers configured
    from PollerSettings.
    """

    def __init__(
        self,
        client: ApplyApiClient,
        settings: PollerSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize automation service.

        Args:
            client: Apply API client
            settings: Poller timing settings
            clock: Timer source for pollers (defaults to the event loop)
        """
        self.client = client
        self.settings = settings or PollerSettings()
        self.clock = clock

    async def start_run(self) -> StartRunResponse:
        """
        Start an automation run.

        Returns:
            StartRunResponse: run_id and the server message
        """
        response = await self.client.start_automation()
        logger.info(f"Automation run {response.run_id} started: {response.message or 'no message'}")
        return response

    async def regenerate_sources(self) -> str:
        """Regenerate job sources and return the server message."""
        return await self.client.regenerate_sources()

    def create_poller(
        self,
        run_id: str,
        on_update: Callable[[ProgressSnapshot], None] | None = None,
        on_close: Callable[[], None] | None = None,
        on_elapsed: Callable[[int], None] | None = None,
    ) -> ProgressPoller:
        """
        Build a poller for a run. The caller owns it and must cancel() it.

        Args:
            run_id: Run to track
            on_update: Called with every applied snapshot
            on_close: Called after the auto-close delay of a completed run
            on_elapsed: Called on every elapsed-clock tick

        Returns:
            ProgressPoller: Poller in IDLE state
        """
        return ProgressPoller(
            run_id,
            self.client.fetch_progress,
            clock=self.clock,
            interval=self.settings.interval_seconds,
            close_delay=self.settings.close_delay_seconds,
            on_update=on_update,
            on_close=on_close,
            on_elapsed=on_elapsed,
        )

    async def watch(
        self,
        run_id: str,
        on_update: Callable[[ProgressSnapshot], None] | None = None,
    ) -> ProgressSnapshot | None:
        """
        Poll a run until it is terminal.

        Args:
            run_id: Run to track
            on_update: Called with every applied snapshot

        Returns:
            ProgressSnapshot | None: Final snapshot (None if nothing was received)
        """
        poller = self.create_poller(run_id, on_update=on_update)
        poller.start()
        try:
            return await poller.wait()
        finally:
            poller.cancel()
