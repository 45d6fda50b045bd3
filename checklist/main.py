# checklist/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool

from checklist.api.health import router as health_router
from checklist.api.inspections import router as inspections_router
from checklist.api.workflows import router as workflows_router
from checklist.core.config import settings
from checklist.core.logging_config import setup_logging
from checklist.services.inspection_repository import InspectionStore, build_repository
from checklist.services.workflow_sessions import WorkflowSessions

logger = logging.getLogger(__name__)


def create_app(repository: InspectionStore | None = None) -> FastAPI:
    """
    Build the API. Without an explicit repository the storage layer is
    opened from settings at startup (falls back to the null store).
    """
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if repository is None:
            # blocking: connects and creates the schema
            app.state.repository = await run_in_threadpool(build_repository, settings)
        else:
            app.state.repository = repository
        app.state.workflow_sessions = WorkflowSessions(ttl_seconds=settings.workflow_session_ttl_seconds or None)
        logger.info("%s %s started (env=%s)", settings.app_name, settings.api_version, settings.env)
        yield
        logger.info("%s stopped, %d open workflow sessions dropped", settings.app_name, len(app.state.workflow_sessions))

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        description=settings.api_description,
        lifespan=lifespan,
    )

    app.include_router(health_router, tags=["health"])
    app.include_router(inspections_router, tags=["inspections"])
    app.include_router(workflows_router, tags=["workflows"])
    return app


app = create_app()
