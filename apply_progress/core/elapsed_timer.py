"""
Presentation clock for a run.

Ticks on its own cadence, independent of network fetches, so a slow
progress request never freezes the visible elapsed time.

Dependencies: apply_progress.core.scheduler
System role: Local elapsed-time source for progress display
"""

import math
from typing import Callable

from apply_progress.core.scheduler import Clock, PeriodicTimer


class ElapsedTimer:
    """Whole seconds elapsed since start(), refreshed every ``interval`` seconds."""

    def __init__(
        self,
        clock: Clock,
        interval: float = 1.0,
        on_tick: Callable[[int], None] | None = None,
    ) -> None:
        self._clock = clock
        self._on_tick = on_tick
        self._started_at: float | None = None
        self._elapsed = 0
        self._timer = PeriodicTimer(clock, interval, self._tick)

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed

    @property
    def running(self) -> bool:
        return self._timer.active

    def start(self) -> None:
        if self._started_at is not None:
            return
        self._started_at = self._clock.now()
        self._timer.start()

    def stop(self) -> None:
        """Freeze the elapsed value. Safe to call repeatedly."""
        self._timer.cancel()

    cancel = stop

    def _tick(self) -> None:
        if self._started_at is None:
            return
        self._elapsed = max(0, math.floor(self._clock.now() - self._started_at))
        if self._on_tick is not None:
            self._on_tick(self._elapsed)
