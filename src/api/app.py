"""
FastAPI application factory.

Wires settings, the Jira service and the skill dispatcher into one app with
CORS enabled for the front-end.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config.settings import Settings, get_settings
from src.jira.client import JiraService
from src.skills.dispatcher import SkillDispatcher

logger = structlog.get_logger()

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """
    FastAPI lifespan context manager.

    Closes the Jira HTTP session on shutdown.
    """
    logger.info("application_starting", skills=fastapi_app.state.dispatcher.names)
    try:
        yield
    finally:
        logger.info("application_shutting_down")
        await fastapi_app.state.dispatcher.jira_service.close()


def create_app(
    settings: Optional[Settings] = None,
    dispatcher: Optional[SkillDispatcher] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings; defaults to the cached settings.
        dispatcher: Skill dispatcher; built from settings when omitted.

    Returns:
        Configured FastAPI app instance.
    """
    settings = settings or get_settings()
    if dispatcher is None:
        dispatcher = SkillDispatcher(JiraService(settings))

    fastapi_app = FastAPI(
        title="Jira Issue Skills",
        description="Jira search skills for duplicates, stale work and task priorities",
        version=APP_VERSION,
        lifespan=lifespan,
        debug=settings.debug,
    )
    fastapi_app.state.settings = settings
    fastapi_app.state.dispatcher = dispatcher

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import router as api_router
    fastapi_app.include_router(api_router)

    @fastapi_app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "version": APP_VERSION,
        }

    return fastapi_app
