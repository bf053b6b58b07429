"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from stockledger.application.dto.responses import HealthResponse, ProviderHealthResponse
from stockledger.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe. Never touches the database."""
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database probe.

    Borrows a pooled connection, runs a trivial query and reads the applied
    schema version. A pool that is exhausted or a file that cannot be opened
    reports ``unhealthy`` instead of failing the request.
    """
    from stockledger.infrastructure.storage.sqlite import get_pool
    from stockledger.infrastructure.storage.sqlite.migrations import get_current_version

    schema_version = None
    try:
        pool = await get_pool()
        started = time.perf_counter()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
            schema_version = await get_current_version(conn)
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=round((time.perf_counter() - started) * 1000, 3),
        )
    except Exception as e:
        logger.warning("db_probe_failed", error_type=type(e).__name__, error=str(e))
        db_status = ProviderHealthResponse(name="sqlite", available=False, error=str(e))

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
        schema_version=schema_version,
    )
