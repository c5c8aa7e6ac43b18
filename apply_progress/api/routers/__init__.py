"""API routers."""

from .automation import router as automation_router
from .automation import sources_router
from .health import router as health_router

__all__ = [
    "automation_router",
    "health_router",
    "sources_router",
]
