"""
Health check endpoints.

``/api/health`` answers without touching any dependency; the ``db`` and
``uploads`` probes check the database and the attachment directory.
"""

import os
import time

import aiosqlite
from fastapi import APIRouter, Depends

from facturacion import __version__
from facturacion.api.dependencies import get_app_settings
from facturacion.application.dto.responses import HealthResponse, ProviderHealthResponse
from facturacion.config import Settings, get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_started_at = time.monotonic()


def _report(**probes: ProviderHealthResponse) -> HealthResponse:
    available = all(p.available for p in probes.values())
    return HealthResponse(
        status="healthy" if available else "unhealthy",
        version=__version__,
        uptime_seconds=round(time.monotonic() - _started_at, 3),
        **probes,
    )


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: the process is up."""
    return _report()


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """Round-trip to SQLite and report the applied schema version."""
    from facturacion.infrastructure.storage.sqlite import get_pool
    from facturacion.infrastructure.storage.sqlite.migrations import get_current_version

    started = time.perf_counter()
    try:
        pool = await get_pool()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
            schema_version = await get_current_version(conn)
    except (aiosqlite.Error, OSError) as e:
        logger.warning("database_health_check_failed", error=str(e))
        probe = ProviderHealthResponse(name="sqlite", available=False, error=str(e))
    else:
        probe = ProviderHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=round((time.perf_counter() - started) * 1000, 2),
            detail=f"schema v{schema_version}" if schema_version else "schema not migrated",
        )
    return _report(database=probe)


@router.get("/uploads", response_model=HealthResponse)
async def uploads_health(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Check the attachment directory exists and is writable."""
    directory = settings.uploads.dir
    if not directory.is_dir():
        probe = ProviderHealthResponse(name="uploads", available=False, error=f"{directory} is missing")
    elif not os.access(directory, os.W_OK):
        probe = ProviderHealthResponse(name="uploads", available=False, error=f"{directory} is read-only")
    else:
        probe = ProviderHealthResponse(name="uploads", available=True, detail=str(directory))
    if not probe.available:
        logger.warning("uploads_health_check_failed", error=probe.error)
    return _report(uploads=probe)
