"""
Main FastAPI application entry point.

The app is built by a factory so that importing this module never reads
the environment:

    uvicorn storagebridge.main:create_app --factory
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from storagebridge.core.config import Settings, get_settings
from storagebridge.infrastructure.logging import configure_logging
from storagebridge.presentation.errors import register_exception_handlers
from storagebridge.presentation.routers import storage_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan.

    - Startup: build the provider registry (logs unconfigured providers)
    - Shutdown: dispose of the database engine
    """
    from storagebridge.core.container import get_database, get_storage_registry

    registry = get_storage_registry()
    logger.info("application_started", providers=len(registry))

    yield

    await get_database().close()
    logger.info("application_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings override (tests); defaults to get_settings().
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Cloud storage connections and media resolution",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # RFC 9457 error responses
    register_exception_handlers(app)

    app.include_router(storage_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint for monitoring and load balancers."""
        return {"status": "healthy"}

    return app
