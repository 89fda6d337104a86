"""FastAPI application factory and lifespan management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from spotlight.config import Settings
from spotlight.errors import UnsupportedPlatformError
from spotlight.events.router import get_router
from spotlight.middleware.auth import APIKeyMiddleware
from spotlight.middleware.logging import RequestLoggingMiddleware
from spotlight.native import get_substrate
from spotlight.native.types import Substrate
from spotlight.routes import health, search

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Resolve the native substrate on startup and report on shutdown.

    A missing substrate does not stop the server; readiness reports it
    and search endpoints answer 503.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    logger.info("api_startup", host=settings.host, port=settings.port)

    if app.state.substrate is None:
        try:
            app.state.substrate = get_substrate()
        except UnsupportedPlatformError as e:
            app.state.substrate_error = str(e)
            logger.warning("substrate_unavailable", error=str(e))

    logger.info(
        "spotlight_ready",
        available=app.state.substrate is not None,
        poll_interval_ms=settings.poll_interval_ms,
        attribute=settings.result_attribute,
    )

    try:
        yield
    finally:
        router = get_router()
        logger.info(
            "api_shutdown",
            open_queries=len(router.registry),
            dropped_notifications=router.dropped_notifications,
        )


def create_app(
    settings: Settings | None = None,
    substrate: Substrate | None = None,
) -> FastAPI:
    """Factory function to create configured FastAPI application.

    Args:
        settings: Configuration instance. Creates default if None.
        substrate: Native substrate. Resolved at startup if None.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Spotlight Search API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/v1/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/api/v1/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.substrate = substrate
    app.state.substrate_error = None

    app.add_middleware(RequestLoggingMiddleware)
    if settings.key:
        app.add_middleware(APIKeyMiddleware, api_key=settings.key)

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(search.router, prefix="/api/v1")

    return app
