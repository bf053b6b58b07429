"""
FastAPI application factory.

Startup applies pending schema migrations and opens the connection pool
before the first request is accepted; shutdown closes every pooled
connection.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockledger import __version__
from stockledger.api.middleware import (
    ErrorHandlerMiddleware,
    LoggingMiddleware,
    setup_exception_handlers,
)
from stockledger.api.routes import (
    health_router,
    inventory_router,
    products_router,
    stock_movements_router,
    warehouses_router,
)
from stockledger.config import Settings, configure_logging, get_logger, get_settings

logger = get_logger(__name__)


async def _prepare_storage(settings: Settings) -> None:
    from stockledger.infrastructure.storage.sqlite import get_pool
    from stockledger.infrastructure.storage.sqlite.migrations import run_migrations

    results = await run_migrations(settings.storage.db_path)
    failed = [r for r in results if not r.success]
    if failed:
        for r in failed:
            logger.error("migration_failed_on_startup", version=r.version, error=r.error)
        raise RuntimeError(f"Migrations failed: {', '.join(r.version for r in failed)}")

    pool = await get_pool()
    logger.info(
        "storage_ready",
        db_path=str(pool.db_path),
        migrations_applied=len(results),
        pool_size=pool.pool_size,
        busy_timeout_ms=pool.busy_timeout,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    from stockledger.infrastructure.storage.sqlite import close_storage

    settings = get_settings()
    logger.info("application_starting", environment=settings.environment, version=__version__)
    await _prepare_storage(settings)

    try:
        yield
    finally:
        await close_storage()
        logger.info("application_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application. Routers hold no state of their own."""
    settings = settings or get_settings()
    configure_logging()

    app = FastAPI(
        title="Stock Ledger API",
        description="Per-warehouse stock quantities with an append-only movement log",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Added last runs first: logging wraps the error handler so error
    # responses still get a request id
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
            allow_headers=["*"],
            expose_headers=["Location", "X-Request-ID", "Retry-After"],
        )

    setup_exception_handlers(app)

    for router in (
        health_router,
        warehouses_router,
        products_router,
        inventory_router,
        stock_movements_router,
    ):
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "stockledger.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
