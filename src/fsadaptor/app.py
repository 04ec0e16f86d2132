"""FastAPI application factory and lifespan management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from fsadaptor.adaptor import FsAdaptor
from fsadaptor.config import Settings
from fsadaptor.middleware.auth import APIKeyMiddleware
from fsadaptor.middleware.logging import RequestLoggingMiddleware
from fsadaptor.routes import docs, health

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log adaptor startup and shutdown.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    adaptor: FsAdaptor = app.state.adaptor
    logger.info(
        "api_startup",
        host=settings.host,
        port=settings.port,
        root_path=str(adaptor.root_path),
    )
    try:
        yield
    finally:
        logger.info("api_shutdown")


def create_app(
    settings: Settings | None = None,
    adaptor: FsAdaptor | None = None,
) -> FastAPI:
    """Factory function to create configured FastAPI application.

    The adaptor is initialized here so a bad root fails before the server
    binds its socket.

    Args:
        settings: Configuration instance. Creates default if None.
        adaptor: Adaptor instance. Built from settings if None.

    Returns:
        Configured FastAPI application.

    Raises:
        ConfigurationError: If the configured root is empty or invalid.
    """
    if settings is None:
        settings = Settings()
    if adaptor is None:
        adaptor = FsAdaptor(settings)
    adaptor.init()

    app = FastAPI(
        title="Filesystem Adaptor",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/v1/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/api/v1/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.adaptor = adaptor

    app.add_middleware(RequestLoggingMiddleware)
    if settings.key:
        app.add_middleware(APIKeyMiddleware, api_key=settings.key)

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(docs.router, prefix="/api/v1")

    return app
