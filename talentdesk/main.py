"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from talentdesk.core.config import settings
from talentdesk.core.logging import configure_logging
from talentdesk.errors import AppError, app_error_handler
from talentdesk.routers import candidates, health, reports, statuses, teams
from talentdesk.services.board_cache import board_cache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    - On startup: configure logging.
    - On shutdown: drop cached pipeline boards.
    """
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting %s...", settings.APP_NAME)

    yield

    board_cache.clear()
    logger.info("Shutting down %s...", settings.APP_NAME)


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Candidate pipeline, team hierarchy and recruiter reporting API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(AppError, app_error_handler)


# Include routers (API endpoints)
app.include_router(health.router, tags=["Health"])
app.include_router(statuses.router)
app.include_router(candidates.router)
app.include_router(candidates.board_router)
app.include_router(teams.router)
app.include_router(reports.router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint - basic info about the API."""
    return {
        "name": settings.APP_NAME,
        "version": "0.1.0",
        "docs": "/docs",
    }
