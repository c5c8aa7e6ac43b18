"""
Automation run API endpoints.

Routes:
    POST /apply/automation/apply-now
    GET  /apply/automation/progress?runId=
    POST /apply/automation/progress/{run_id}
    POST /apply/sources/regenerate

Dependencies: apply_progress.application.services.run_registry, apply_progress.models
System role: Run start and progress HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from apply_progress.api.deps import get_run_registry
from apply_progress.application.services.run_registry import RunRegistry
from apply_progress.core.exceptions import RunAlreadyFinishedError, RunNotFoundError
from apply_progress.models.progress import ProgressSnapshot
from apply_progress.models.run import PublishSnapshotRequest, StartRunResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/apply/automation", tags=["automation"])
sources_router = APIRouter(prefix="/apply/sources", tags=["sources"])


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str


@router.post("/apply-now", response_model=StartRunResponse)
async def apply_now(
    registry: RunRegistry = Depends(get_run_registry),
) -> StartRunResponse:
    """
    Start an automation run.

    Creates a pending run; its worker publishes progress through
    POST /apply/automation/progress/{run_id}.

    Returns:
        StartRunResponse: run_id to poll and a user-facing message
    """
    run = await registry.create_run()
    return StartRunResponse(run_id=run.run_id, message="Automation started successfully")


@router.get(
    "/progress",
    response_model=ProgressSnapshot,
    response_model_exclude_none=True,
)
async def get_progress(
    run_id: str = Query(..., alias="runId", min_length=1),
    registry: RunRegistry = Depends(get_run_registry),
) -> ProgressSnapshot:
    """
    Get the latest progress snapshot of a run for client polling.

    Clients poll this every second until status is completed or failed.
    The body is the bare snapshot (no envelope).

    Raises:
        HTTPException(404): Run unknown or no progress published yet
    """
    try:
        return await registry.get_snapshot(run_id)
    except RunNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/progress/{run_id}", status_code=204)
async def publish_progress(
    run_id: str,
    request: PublishSnapshotRequest,
    registry: RunRegistry = Depends(get_run_registry),
) -> None:
    """
    Publish a progress snapshot for a run (worker hook).

    Raises:
        HTTPException(404): Run unknown
        HTTPException(409): Run already completed or failed
    """
    try:
        await registry.publish(run_id, request.snapshot)
    except RunNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except RunAlreadyFinishedError as e:
        raise HTTPException(status_code=409, detail=e.message)


@sources_router.post("/regenerate", response_model=MessageResponse)
async def regenerate_sources() -> MessageResponse:
    """Regenerate job sources."""
    logger.info("Job sources regeneration requested")
    return MessageResponse(message="Sources regenerated successfully")
