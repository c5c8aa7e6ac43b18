"""
Progress snapshot domain models.

Point-in-time status payload returned by the run progress endpoint,
validated at the transport boundary before the poller applies it.

Dependencies: pydantic
System role: Progress endpoint API contract
"""

import enum
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from apply_progress.core.exceptions import MalformedSnapshotError


class RunStatus(str, enum.Enum):
    """
    Automation run states reported by the progress endpoint.

    PENDING: Run created, worker not started (also used when status is unset)
    FETCHING: Pulling jobs from sources
    MATCHING: Scoring fetched jobs against the profile
    APPLYING: Submitting applications
    RUNNING: Generic in-progress state
    COMPLETED: Run finished successfully (terminal)
    FAILED: Run finished with an error (terminal)
    ERROR: Synthesized locally when progress cannot be fetched
    """

    PENDING = "pending"
    FETCHING = "fetching"
    MATCHING = "matching"
    APPLYING = "applying"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    ERROR = "error"


TERMINAL_STATUSES = frozenset({RunStatus.COMPLETED, RunStatus.FAILED})

ERROR_STEP = "Error fetching progress"


class ProgressDetails(BaseModel):
    """Run counters. Unknown keys sent by the server are kept."""

    model_config = ConfigDict(extra="allow")

    jobs_fetched: int = Field(default=0, ge=0)
    jobs_matched: int = Field(default=0, ge=0)
    jobs_applied: int = Field(default=0, ge=0)
    jobs_failed: int = Field(default=0, ge=0)
    limit_reached: bool | None = None
    daily_applied: int | None = None
    daily_limit: int | None = None
    total_jobs: int | None = None
    processed_jobs: int | None = None

    @field_validator(
        "jobs_fetched", "jobs_matched", "jobs_applied", "jobs_failed", mode="before"
    )
    @classmethod
    def zero_missing_counters(cls, v):
        return 0 if v is None else v


class CurrentJob(BaseModel):
    """Unit of work in progress."""

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    company: str | None = None
    index: int = Field(default=0, description="1-based position, 0 when unknown")
    total: int = 0

    @field_validator("index", "total", mode="before")
    @classmethod
    def zero_missing_positions(cls, v):
        return 0 if v is None else v


class RunTiming(BaseModel):
    """Server-side timing hints."""

    model_config = ConfigDict(extra="allow")

    elapsed_formatted: str | None = None
    estimated_remaining_seconds: float | None = None
    estimated_remaining_formatted: str | None = None

    @field_validator("estimated_remaining_seconds", mode="before")
    @classmethod
    def drop_non_finite_estimate(cls, v):
        if isinstance(v, (int, float)) and not math.isfinite(v):
            return None
        return v


class LogEntry(BaseModel):
    """Run log line. Fields other than message are passed through."""

    model_config = ConfigDict(extra="allow")

    message: str


class ProgressSnapshot(BaseModel):
    """Point-in-time status of an automation run."""

    model_config = ConfigDict(frozen=True)

    status: RunStatus = RunStatus.PENDING
    current_step: str | None = None
    progress: float = Field(default=0.0, description="Percentage, clamped to 0-100")
    details: ProgressDetails = Field(default_factory=ProgressDetails)
    current_job: CurrentJob | None = None
    time: RunTiming | None = None
    logs: list[LogEntry] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def default_unset_status(cls, v):
        if v is None or v == "":
            return RunStatus.PENDING
        return v

    @field_validator("progress", mode="before")
    @classmethod
    def clamp_progress(cls, v):
        if v is None:
            return 0.0
        value = float(v)
        if math.isnan(value):
            return 0.0
        return min(100.0, max(0.0, value))

    @field_validator("details", mode="before")
    @classmethod
    def default_details(cls, v):
        return {} if v is None else v

    @field_validator("logs", mode="before")
    @classmethod
    def default_logs(cls, v):
        return [] if v is None else v

    @property
    def is_terminal(self) -> bool:
        """True once the run completed or failed."""
        return self.status in TERMINAL_STATUSES

    @classmethod
    def error_snapshot(cls) -> "ProgressSnapshot":
        """Snapshot shown when progress can no longer be fetched."""
        return cls(
            status=RunStatus.ERROR,
            current_step=ERROR_STEP,
            progress=0,
            details=ProgressDetails(),
            logs=[],
        )


def parse_snapshot(payload: Any, accept_envelope: bool = True) -> ProgressSnapshot:
    """
    Validate a decoded progress body into a snapshot.

    The bare snapshot object is the canonical shape. A ``{"data": {...}}``
    envelope is unwrapped while ``accept_envelope`` is set.

    Args:
        payload: Decoded JSON body
        accept_envelope: Unwrap a ``data`` envelope when present

    Returns:
        ProgressSnapshot: Validated snapshot

    Raises:
        MalformedSnapshotError: Payload is not an object or fails validation
    """
    data = payload
    if (
        accept_envelope
        and isinstance(payload, dict)
        and "status" not in payload
        and isinstance(payload.get("data"), dict)
    ):
        data = payload["data"]

    if not isinstance(data, dict):
        raise MalformedSnapshotError(
            "Progress payload is not an object",
            {"payload_type": type(data).__name__},
        )

    try:
        return ProgressSnapshot.model_validate(data)
    except ValidationError as e:
        raise MalformedSnapshotError(
            "Progress payload failed validation",
            {"errors": e.error_count(), "first_error": e.errors()[0]["msg"]},
        ) from e
