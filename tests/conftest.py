"""
Shared test fixtures and configuration for entire test suite.

Provides: fake clock for deterministic timers, snapshot factory, event-loop
settling helper
Dependencies: pytest, pytest-asyncio
System role: Test infrastructure and fixture management
"""

import asyncio
import itertools
import uuid

import pytest

from apply_progress.core.scheduler import Clock
from apply_progress.models.progress import ProgressSnapshot


class FakeTimer:
    """Handle returned by FakeClock.call_later."""

    def __init__(self, when: float, seq: int, callback) -> None:
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeClock(Clock):
    """
    Manually advanced clock.

    advance() fires due callbacks in (time, registration) order, moving
    "now" to each callback's due time before running it.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._seq = itertools.count()
        self._timers: list[FakeTimer] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay, callback) -> FakeTimer:
        timer = FakeTimer(self._now + delay, next(self._seq), callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> int:
        """Number of live (not cancelled, not fired) timers."""
        return sum(1 for t in self._timers if not t.cancelled)

    def advance(self, seconds: float) -> None:
        target = self._now + seconds
        while True:
            due = [t for t in self._timers if not t.cancelled and t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.when, t.seq))
            self._timers.remove(timer)
            self._now = timer.when
            timer.callback()
        self._timers = [t for t in self._timers if not t.cancelled]
        self._now = target


async def _settle(rounds: int = 10) -> None:
    """Let spawned fetch tasks run to completion."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def fake_clock() -> FakeClock:
    """Fresh fake clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def settle():
    """Coroutine function yielding to the event loop a few times."""
    return _settle


@pytest.fixture
def run_id() -> str:
    """Generate a test run ID."""
    return str(uuid.uuid4())


@pytest.fixture
def make_snapshot():
    """
    Snapshot factory.

    Returns:
        Callable: (status="fetching", **fields) -> ProgressSnapshot
    """

    def _make(status: str = "fetching", **fields) -> ProgressSnapshot:
        return ProgressSnapshot.model_validate({"status": status, **fields})

    return _make
