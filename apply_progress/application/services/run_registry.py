"""
In-memory run registry.

Backs the reference progress endpoint: creates runs, stores the latest
snapshot published for each, and refuses updates after a terminal one.

Dependencies: apply_progress.models
System role: Run progress storage for the reference API
"""

import logging
import uuid

from apply_progress.core.exceptions import RunAlreadyFinishedError, RunNotFoundError
from apply_progress.models.progress import ProgressSnapshot
from apply_progress.models.run import JobRun

logger = logging.getLogger(__name__)


class RunRegistry:
    """
    Latest progress snapshot per run.

    A run exists from create_run() on, with no snapshot until a worker
    publishes one; the progress endpoint reports such runs as not found.
    """

    def __init__(self) -> None:
        self._runs: dict[str, JobRun] = {}
        self._snapshots: dict[str, ProgressSnapshot] = {}

    async def create_run(self) -> JobRun:
        """
        Register a new run.

        Returns:
            JobRun: Run with a fresh opaque run_id
        """
        run = JobRun(run_id=str(uuid.uuid4()))
        self._runs[run.run_id] = run
        logger.info(f"Created run {run.run_id}")
        return run

    async def publish(self, run_id: str, snapshot: ProgressSnapshot) -> None:
        """
        Store the latest snapshot of a run.

        Args:
            run_id: Run ID
            snapshot: New snapshot

        Raises:
            RunNotFoundError: Unknown run
            RunAlreadyFinishedError: Run already reported completed/failed
        """
        if run_id not in self._runs:
            raise RunNotFoundError(run_id)
        current = self._snapshots.get(run_id)
        if current is not None and current.is_terminal:
            raise RunAlreadyFinishedError(run_id, current.status.value)
        self._snapshots[run_id] = snapshot
        logger.debug(f"Run {run_id} -> {snapshot.status.value} ({snapshot.progress:.0f}%)")

    async def get_snapshot(self, run_id: str) -> ProgressSnapshot:
        """
        Latest snapshot of a run.

        Raises:
            RunNotFoundError: Unknown run, or no snapshot published yet
        """
        snapshot = self._snapshots.get(run_id)
        if snapshot is None:
            raise RunNotFoundError(run_id)
        return snapshot

    async def get_run(self, run_id: str) -> JobRun:
        run = self._runs.get(run_id)
        if run is None:
            raise RunNotFoundError(run_id)
        return run

    async def delete_run(self, run_id: str) -> None:
        if self._runs.pop(run_id, None) is None:
            raise RunNotFoundError(run_id)
        self._snapshots.pop(run_id, None)

    async def count_runs(self) -> tuple[int, int]:
        """
        Count tracked runs.

        Returns:
            tuple[int, int]: (all runs, runs not yet completed or failed)
        """
        finished = sum(1 for snapshot in self._snapshots.values() if snapshot.is_terminal)
        return len(self._runs), len(self._runs) - finished
