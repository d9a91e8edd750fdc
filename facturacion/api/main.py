"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from facturacion import __version__
from facturacion.api.middleware import (
    ErrorHandlerMiddleware,
    LoggingMiddleware,
    setup_exception_handlers,
)
from facturacion.api.routes import clients_router, health_router, invoices_router
from facturacion.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the database and opens the connection pool on startup;
    closes the pool on shutdown.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        environment=settings.environment,
    )

    from facturacion.infrastructure.storage.sqlite import close_pool, get_pool, reset_stores
    from facturacion.infrastructure.storage.sqlite.migrations import run_migrations

    try:
        await run_migrations()
        logger.info("database_initialized")

        await get_pool()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    settings.uploads.dir.mkdir(parents=True, exist_ok=True)
    logger.info("application_started", uploads_dir=str(settings.uploads.dir))

    yield

    logger.info("application_stopping")

    await close_pool()
    reset_stores()

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="Facturacion API",
        description="Multi-tenant invoicing: invoices, attachments, clients and yearly reports",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(invoices_router)
    app.include_router(clients_router)

    # Attachments are served as-is from the uploads directory
    app.mount(
        settings.uploads.mount_path,
        StaticFiles(directory=str(settings.uploads.dir), check_dir=False),
        name="uploads",
    )

    # Root health endpoint (for k8s/docker health checks)
    @app.get("/health", tags=["health"])
    async def root_health() -> dict[str, str]:
        """Simple health check at root level."""
        return {
            "status": "healthy",
            "version": __version__,
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "facturacion.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
