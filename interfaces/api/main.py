"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from infrastructure.config import settings
from infrastructure.logging import setup_logging
from interfaces.api.middleware import cors_http_exception_handler
from interfaces.api.routes.download_routes import router as download_router
from interfaces.api.routes.media_routes import router as media_router
from interfaces.dependencies import close_container

# Configure structured logging
setup_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # noqa: ARG001
    """Handle application startup and shutdown."""
    logger.info("app_starting", env=settings.app_env)

    missing = settings.missing_storage_settings()
    if missing:
        # Requests will fail with 500 until this is fixed
        logger.error("storage_configuration_missing", missing=list(missing))

    logger.info("app_ready", media_mount_prefix=settings.media_mount_prefix)

    yield

    # Cleanup
    logger.info("app_shutting_down")
    await close_container()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Drill library media proxy",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Media routes answer CORS themselves, including on errors
    app.add_exception_handler(StarletteHTTPException, cors_http_exception_handler)

    # Include routers
    app.include_router(media_router)
    app.include_router(download_router)

    @app.get("/healthz")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Create app instance
app = create_app()


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run(
        "interfaces.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
