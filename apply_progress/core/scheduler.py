"""
Owned timer handles.

A Clock abstracts "now" and delayed callbacks; OneShotTimer and
PeriodicTimer wrap it with explicit start()/cancel() so every timer has a
single owner and a deterministic lifetime. Callbacks never fire after
cancel().

Dependencies: asyncio
System role: Scheduling for the poller, elapsed timer and auto-close
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """Anything with a cancel() method (asyncio.TimerHandle satisfies it)."""

    def cancel(self) -> None: ...


class Clock(ABC):
    """Time source and delayed-callback registry."""

    @abstractmethod
    def now(self) -> float:
        """Monotonic time in seconds."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""


class AsyncioClock(Clock):
    """Clock backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return self.loop.call_later(delay, callback)


class OneShotTimer:
    """Fires ``callback`` once, ``delay`` seconds after start()."""

    def __init__(self, clock: Clock, delay: float, callback: Callable[[], None]) -> None:
        self._clock = clock
        self._delay = delay
        self._callback = callback
        self._handle: TimerHandle | None = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None:
            return
        self._handle = self._clock.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        if self._handle is None:
            return
        self._handle = None
        self._callback()


class PeriodicTimer:
    """
    Fires ``callback`` every ``interval`` seconds until cancelled.

    The next tick is armed after the callback returns. With
    ``immediate=True`` start() also fires once synchronously.
    """

    def __init__(
        self,
        clock: Clock,
        interval: float,
        callback: Callable[[], None],
        immediate: bool = False,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self._clock = clock
        self._interval = interval
        self._callback = callback
        self._immediate = immediate
        self._active = False
        self._handle: TimerHandle | None = None

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        if self._active:
            return
        self._active = True
        if self._immediate:
            self._callback()
        if self._active:
            self._arm()

    def cancel(self) -> None:
        self._active = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        self._handle = self._clock.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        self._handle = None
        if not self._active:
            return
        self._callback()
        if self._active:
            self._arm()
