"""
GET /health: PostgreSQL and Redis probes.

PostgreSQL down means nothing works, so the service is ``unhealthy``.
Redis down only blocks submissions (the gate fails closed), so the
service is ``degraded``.
"""

import time
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from fastapi import APIRouter, Depends

from mulaboard import __version__
from mulaboard.api.dependencies import get_database, get_redis_client
from mulaboard.api.models import ComponentHealth, HealthResponse
from mulaboard.storage.database import Database

router = APIRouter()
logger = structlog.get_logger(__name__)


async def _probe(check: Callable[[], Awaitable[Any]]) -> ComponentHealth:
    """Time ``check``; a falsy result or any exception counts as unhealthy."""
    started = time.perf_counter()
    try:
        ok = await check()
    except Exception as e:
        return ComponentHealth(
            status="unhealthy",
            latency_ms=round((time.perf_counter() - started) * 1000, 2),
            details={"error": str(e)},
        )
    return ComponentHealth(
        status="healthy" if ok else "unhealthy",
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Probe PostgreSQL and Redis.",
)
async def health_check(
    db: Database = Depends(get_database),
    redis_client: Any = Depends(get_redis_client),
) -> HealthResponse:
    components = {
        "database": await _probe(db.health_check),
        "redis": await _probe(redis_client.ping),
    }

    if components["database"].status == "unhealthy":
        status = "unhealthy"
    elif components["redis"].status == "unhealthy":
        status = "degraded"
    else:
        status = "healthy"

    if status != "healthy":
        logger.warning(
            "Health check failed",
            status=status,
            database=components["database"].status,
            redis=components["redis"].status,
        )

    return HealthResponse(status=status, components=components, version=__version__)
