"""
Run progress poller.

Drives one automation run from start to a terminal status: fetches the
progress snapshot immediately and then on a fixed interval, keeps at most
one request in flight, and stops as soon as the run completes or fails.

Failure classification happens here and never reaches the caller:
    - RunNotFoundError: the run is not visible yet; keep polling
    - MalformedSnapshotError: skip this tick; keep polling
    - anything else: show the local error snapshot and stop

Dependencies: asyncio, apply_progress.core.scheduler, apply_progress.models
System role: Client-side long-poll state machine
"""

import asyncio
import enum
import logging
from typing import Awaitable, Callable

from apply_progress.core.elapsed_timer import ElapsedTimer
from apply_progress.core.exceptions import MalformedSnapshotError, RunNotFoundError
from apply_progress.core.scheduler import AsyncioClock, Clock, OneShotTimer, PeriodicTimer
from apply_progress.models.progress import ProgressSnapshot, RunStatus
from apply_progress.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)

logger = logging.getLogger(__name__)

FetchProgress = Callable[[str], Awaitable[ProgressSnapshot]]


class PollerState(str, enum.Enum):
    """
    Poller lifecycle.

    IDLE: Created, start() not called (or no run_id)
    POLLING: Fetching on the interval
    TERMINAL: Run completed/failed, or progress could not be fetched
    CANCELLED: Disposed by the owner before reaching a terminal status
    """

    IDLE = "idle"
    POLLING = "polling"
    TERMINAL = "terminal"
    CANCELLED = "cancelled"


class ProgressPoller:
    """
    Poll a run's progress until it reaches a terminal status.

    The network poll and the elapsed-time clock are two separate timers,
    started and stopped together. All state is owned by the instance;
    callers read it through the properties or the callbacks.
    """

    def __init__(
        self,
        run_id: str | None,
        fetch: FetchProgress,
        *,
        clock: Clock | None = None,
        interval: float = 1.0,
        close_delay: float = 3.0,
        on_update: Callable[[ProgressSnapshot], None] | None = None,
        on_close: Callable[[], None] | None = None,
        on_elapsed: Callable[[int], None] | None = None,
    ) -> None:
        """
        Initialize poller.

        Args:
            run_id: Run to poll; start() is a no-op when empty
            fetch: Coroutine function returning the current snapshot
            clock: Timer source (defaults to the running event loop)
            interval: Seconds between fetches
            close_delay: Seconds after completion before on_close fires
            on_update: Called with every applied snapshot
            on_close: Called once, close_delay seconds after a completed snapshot
            on_elapsed: Called with the local elapsed seconds on every clock tick
        """
        self.run_id = run_id
        self._fetch = fetch
        self._clock = clock or AsyncioClock()
        self._on_update = on_update
        self._on_close = on_close

        self._state = PollerState.IDLE
        self._snapshot: ProgressSnapshot | None = None
        self._in_flight: asyncio.Future | None = None
        self._done = asyncio.Event()

        self._poll_timer = PeriodicTimer(self._clock, interval, self._tick, immediate=True)
        self._elapsed_timer = ElapsedTimer(self._clock, on_tick=on_elapsed)
        self._close_timer = OneShotTimer(self._clock, close_delay, self._fire_close)

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def snapshot(self) -> ProgressSnapshot | None:
        """Latest applied snapshot, None until the first one arrives."""
        return self._snapshot

    @property
    def is_polling(self) -> bool:
        return self._state is PollerState.POLLING

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed_timer.elapsed_seconds

    def start(self) -> None:
        """Fetch once now, then every interval until terminal or cancelled."""
        if not self.run_id:
            logger.warning("Progress poller not started: missing run_id")
            return
        if self._state is not PollerState.IDLE:
            return

        log_with_context(logger, logging.INFO, "Polling run progress", run_id=self.run_id)
        self._state = PollerState.POLLING
        self._elapsed_timer.start()
        self._poll_timer.start()

    def cancel(self) -> None:
        """
        Dispose the poller.

        Clears every timer; a fetch still in flight is left to finish and its
        result is discarded. Safe to call more than once.
        """
        self._poll_timer.cancel()
        self._elapsed_timer.cancel()
        self._close_timer.cancel()
        if self._state in (PollerState.IDLE, PollerState.POLLING):
            self._state = PollerState.CANCELLED
            log_with_context(logger, logging.INFO, "Progress poller cancelled", run_id=self.run_id)
        self._done.set()

    async def wait(self) -> ProgressSnapshot | None:
        """Wait until the poller is terminal or cancelled and return the last snapshot."""
        if self._state is PollerState.IDLE:
            return self._snapshot
        await self._done.wait()
        return self._snapshot

    def _tick(self) -> None:
        if self._state is not PollerState.POLLING:
            return
        if self._in_flight is not None:
            logger.debug(f"Skipping progress tick for run {self.run_id}: request in flight")
            return
        self._in_flight = asyncio.ensure_future(self._poll_once())

    async def _poll_once(self) -> None:
        try:
            snapshot = await self._fetch(self.run_id)
        except RunNotFoundError:
            logger.debug(f"Run {self.run_id} not found yet, continuing to poll")
            return
        except MalformedSnapshotError as e:
            if self._state is PollerState.POLLING:
                log_with_context(
                    logger,
                    logging.WARNING,
                    "Invalid progress response, skipping tick",
                    run_id=self.run_id,
                    details=e.details,
                )
            return
        except Exception as e:
            if self._state is PollerState.POLLING:
                log_exception_with_context(
                    logger, "Error polling progress", e, run_id=self.run_id
                )
                self._apply(ProgressSnapshot.error_snapshot())
                self._finish()
            return
        finally:
            self._in_flight = None

        if self._state is not PollerState.POLLING:
            logger.debug(f"Discarding progress for run {self.run_id}: poller {self._state.value}")
            return

        self._apply(snapshot)
        if snapshot.is_terminal:
            log_with_context(
                logger,
                logging.INFO,
                "Run reached terminal status",
                run_id=self.run_id,
                status=snapshot.status.value,
            )
            self._finish()
            if snapshot.status is RunStatus.COMPLETED:
                self._close_timer.start()

    def _apply(self, snapshot: ProgressSnapshot) -> None:
        self._snapshot = snapshot
        if self._on_update is None:
            return
        try:
            self._on_update(snapshot)
        except Exception as e:
            log_exception_with_context(
                logger, "Progress update callback failed", e, run_id=self.run_id
            )

    def _finish(self) -> None:
        self._state = PollerState.TERMINAL
        self._poll_timer.cancel()
        self._elapsed_timer.stop()
        self._done.set()

    def _fire_close(self) -> None:
        if self._on_close is None:
            return
        try:
            self._on_close()
        except Exception as e:
            log_exception_with_context(
                logger, "Progress close callback failed", e, run_id=self.run_id
            )
