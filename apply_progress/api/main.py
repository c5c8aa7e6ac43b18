"""
FastAPI application with assembled routers.

Initializes FastAPI app with the automation and health routers and
configures uvicorn server.

Dependencies: fastapi, apply_progress.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import automation_router, health_router, sources_router


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Apply Progress API",
        description="Automation run start and progress polling endpoints",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(automation_router, prefix="/api")
    app.include_router(sources_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "apply_progress.api.main:app",
        host="0.0.0.0",
        port=4002,
    )
