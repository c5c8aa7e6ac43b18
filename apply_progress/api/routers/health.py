"""
Health check API endpoint.

Routes: GET /health

Reports liveness together with how many runs the registry is tracking,
so a stuck worker shows up as active runs that never drain.

Dependencies: apply_progress.api.deps
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from apply_progress.api.deps import get_run_registry
from apply_progress.application.services.run_registry import RunRegistry


class HealthResponse(BaseModel):
    """Liveness and run counts."""

    status: str
    runs_tracked: int
    runs_active: int


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(
    registry: RunRegistry = Depends(get_run_registry),
) -> HealthResponse:
    tracked, active = await registry.count_runs()
    return HealthResponse(status="healthy", runs_tracked=tracked, runs_active=active)
