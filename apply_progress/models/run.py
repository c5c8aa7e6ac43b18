"""
Run domain models.

Request/response schemas for starting automation runs and publishing
progress for them.

Dependencies: pydantic
System role: Run lifecycle API contracts
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from apply_progress.models.progress import ProgressSnapshot


class JobRun(BaseModel):
    """One execution of the background automation job."""

    model_config = ConfigDict(frozen=True)

    run_id: str = Field(min_length=1, description="Opaque run identifier")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class StartRunResponse(BaseModel):
    """Response of the apply-now endpoint."""

    model_config = ConfigDict(extra="allow")

    run_id: str
    message: str | None = None

    @field_validator("run_id")
    @classmethod
    def validate_run_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("run_id must be non-empty")
        return v


class PublishSnapshotRequest(BaseModel):
    """Snapshot pushed by a worker for a run."""

    snapshot: ProgressSnapshot
