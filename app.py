"""
app.py - FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the scheduling service and registers the router.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from backend.controllers.scheduling_controller import router as scheduling_router
from backend.services.scheduling_service import SchedulingService
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    The scheduling service is stateless between calls, so one instance is
    shared by every request through app.state.
    """
    resolved_settings = settings or get_settings()
    scheduling_service = SchedulingService(settings=resolved_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Startup complete | app=%s | version=%s | backtracking_budget_ms=%s",
            resolved_settings.app_name,
            resolved_settings.app_version,
            resolved_settings.backtracking_time_budget_ms,
        )
        yield

    app = FastAPI(
        title=resolved_settings.app_name,
        version=resolved_settings.app_version,
        lifespan=lifespan,
    )
    app.include_router(scheduling_router)
    app.state.scheduling_service = scheduling_service

    return app


# Module-level app object for uvicorn
app = create_app()
