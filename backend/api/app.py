"""
FastAPI application factory for the Club Live API service.

Creates the app with:
- Match routes (grade listing and current match for a team)
- Club config endpoint
- Middleware stack and exception handlers
- Health check endpoint
- Lifespan management (upstream client startup/shutdown)
"""
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI

from shared.config import get_settings
from shared.utils.http_client import UpstreamClient
from shared.utils.logging import get_logger, setup_logging
from shared.utils.metrics import start_metrics_server

from api.dependencies import init_dependencies, reset_dependencies
from api.middleware import setup_middleware
from api.routes.config import router as config_router
from api.routes.matches import router as matches_router
from ingest.providers.grassroots import GrassrootsProvider

logger = get_logger(__name__)

_started_at = time.monotonic()


@asynccontextmanager
async def _noop_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """No-op lifespan for testing without the upstream client."""
    yield


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.
    Starts the shared upstream client on startup and closes it on shutdown.
    """
    settings = get_settings()
    setup_logging("api")
    start_metrics_server()

    client = UpstreamClient(
        base_url=settings.upstream_base_url,
        timeout_s=settings.upstream_timeout_s,
        headers={"Accept": "application/json, text/html;q=0.9"},
    )
    provider = GrassrootsProvider(client, feature_flag=settings.upstream_feature_flag)
    await provider.start()
    init_dependencies(provider)
    logger.info(
        "api_started",
        upstream=settings.upstream_base_url,
        upstream_timeout_s=settings.upstream_timeout_s,
        environment=settings.environment.value,
    )

    try:
        yield
    finally:
        await provider.close()
        reset_dependencies()
        logger.info("api_stopped")


def create_app(*, use_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application. Set use_lifespan=False for testing without upstream."""
    app = FastAPI(
        title="Club Live API",
        description="Current-match view for a team in a grassroots cricket grade",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else _noop_lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    setup_middleware(app)

    app.include_router(matches_router)
    app.include_router(config_router)

    @app.get("/health", tags=["system"])
    async def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "service": "api",
            "uptime": round(time.monotonic() - _started_at, 3),
            "timestamp": int(time.time() * 1000),
        }

    return app


# For running with uvicorn directly
app = create_app()
