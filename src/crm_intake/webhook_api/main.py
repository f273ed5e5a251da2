"""FastAPI application factory for the inquiry webhook service."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .. import __version__
from ..storage import run_migrations
from .config import settings
from .middleware.cors import ScopedCORSMiddleware, allowed_origins
from .middleware.rate_limit import FixedWindowRateLimiter
from .routes.desk import router as desk_router
from .routes.health import router as health_router
from .routes.webhooks import inquiry_router, recruit_router
from .services.ingestion import get_db_connection

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting CRM intake webhook service")
    conn = get_db_connection()
    try:
        applied = run_migrations(conn)
        logger.info(f"Database migrations applied: {applied}")
    finally:
        conn.close()

    yield

    logger.info("CRM intake webhook service shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="CRM Intake",
        description="Inquiry webhooks and inquiry desk for the marketing site",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(ScopedCORSMiddleware, origins=allowed_origins())

    # One process-local limiter per webhook
    app.state.rate_limiters = {
        name: FixedWindowRateLimiter(
            limit=settings.rate_limit,
            window_seconds=settings.rate_window_seconds,
        )
        for name in ("inquiry", "recruit")
    }

    app.include_router(health_router)
    app.include_router(inquiry_router(app.state.rate_limiters["inquiry"]))
    app.include_router(recruit_router(app.state.rate_limiters["recruit"]))
    app.include_router(desk_router)

    return app
