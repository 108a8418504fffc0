"""FastAPI application factory and entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from storefront.config import settings
from storefront.database import close_db
from storefront.exceptions import create_exception_handlers
from storefront.services.cache_service import close_cache, get_cache, init_cache

log_level = logging.DEBUG if settings.is_development else getattr(logging, settings.app_log_level.upper())
logging.basicConfig(
    level=log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    force=True,
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Route handlers are mounted by the surrounding application; this shell
    owns the cache and database lifecycle and the error envelope.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
        await init_cache()
        yield
        logger.info(f"Shutting down {settings.app_name}")
        await close_cache()
        await close_db()

    app = FastAPI(
        title=settings.app_name,
        description="Storefront configuration, settings and navigation services",
        version="1.0.0",
        docs_url="/api/docs" if settings.app_debug else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.app_debug else None,
        lifespan=lifespan,
    )

    # Register exception handlers
    for exc_class, handler in create_exception_handlers().items():
        app.add_exception_handler(exc_class, handler)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "app": settings.app_name,
            "env": settings.app_env,
            "cache": get_cache().is_available,
        }

    return app


# Create the app instance
app = create_app()


def main():
    """Entry point for running the application."""
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.app_log_level.lower(),
    )


if __name__ == "__main__":
    main()
