"""Data contracts for runs and progress snapshots."""

from apply_progress.models.progress import (
    TERMINAL_STATUSES,
    CurrentJob,
    LogEntry,
    ProgressDetails,
    ProgressSnapshot,
    RunStatus,
    RunTiming,
    parse_snapshot,
)
from apply_progress.models.run import JobRun, PublishSnapshotRequest, StartRunResponse

__all__ = [
    "TERMINAL_STATUSES",
    "CurrentJob",
    "JobRun",
    "LogEntry",
    "ProgressDetails",
    "ProgressSnapshot",
    "PublishSnapshotRequest",
    "RunStatus",
    "RunTiming",
    "StartRunResponse",
    "parse_snapshot",
]
