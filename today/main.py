"""
Today Service API

Thin FastAPI backend serving today's date from a slow backend, bounded by a
deadline and protected by a cache and a last-good fallback.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from today.config import get_settings
from today.middleware import RequestContextMiddleware
from today.routers import today
from today.services.today import close_today_service

logger = logging.getLogger(__name__)

settings = get_settings()

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: release the backend worker pool on shutdown."""
    logger.info("Serving today's date in %s mode", get_settings().service_mode)
    yield
    close_today_service()


app = FastAPI(
    title="Today Service API",
    description="Today's date within a deadline, cached and fallback-protected",
    version=VERSION,
    debug=settings.debug,
    lifespan=lifespan,
)

# Request ID + timing headers
app.add_middleware(RequestContextMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Routers
app.include_router(today.router, prefix="/api")


@app.get("/api/health")
async def health_check() -> dict[str, Any]:
    """Liveness check; backend health is reported by /api/today/status."""
    return {
        "status": "ok",
        "service": "today-service",
        "version": VERSION,
        "mode": get_settings().service_mode,
    }
