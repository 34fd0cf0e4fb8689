"""FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import get_settings
from ..utils.logging_utils import configure_logging
from .routes import review_router
from .session_manager import get_session_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler."""
    logger = logging.getLogger(__name__)
    logger.info("[STARTUP] Agentic Review API ready")

    yield

    # Shutdown
    if await get_session_manager().cancel():
        logger.info("[SHUTDOWN] Cancelled running review")


def create_app() -> FastAPI:
    """Create FastAPI application."""
    settings = get_settings()

    # Configure logging on every app creation (works with --reload)
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Agentic Review",
        description="Multi-agent AI code review for GitHub repositories",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(review_router, prefix="/api")

    @app.get("/api/health")
    def health_check() -> dict[str, Any]:
        """Basic health check."""
        return {
            "status": "ok",
            "service": "agentic-review",
            "version": __version__,
            "gemini_configured": get_settings().agents.has_gemini,
        }

    return app
