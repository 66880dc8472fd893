"""
Admin Routes
============

Operational endpoints for the response cache:

    GET    /admin/cache/metrics   hits / misses / size of the running engine
    DELETE /admin/cache/{key}     evict one entry regardless of its TTL
    GET    /admin/metrics         Prometheus exposition of every cache series

These paths are always excluded from caching (see ADMIN_ROUTES); serving a
cached metrics snapshot would defeat the point of asking for one.

SECURITY CONSIDERATIONS:
------------------------
In production, admin endpoints should be protected by authentication and
exposed on an internal network only. verify_admin_access is the hook for it.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from response_cache.infrastructure.monitoring.metrics_collector import render_latest

logger = structlog.get_logger(__name__)

ADMIN_PREFIX = "/admin"
CACHE_METRICS_PATH = "/cache/metrics"
PROMETHEUS_PATH = "/metrics"

# Exact paths the cache must never serve
ADMIN_ROUTES = frozenset(
    {ADMIN_PREFIX + CACHE_METRICS_PATH, ADMIN_PREFIX + PROMETHEUS_PATH}
)

router = APIRouter(prefix=ADMIN_PREFIX, tags=["Admin"])


async def verify_admin_access() -> None:
    """Placeholder for admin authentication; always allows."""


def get_cache_engine(request: Request):
    """Dependency returning the CacheEngine stored on the application state."""
    engine = getattr(request.app.state, "cache_engine", None)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Response cache is not configured",
        )
    return engine


@router.get(
    CACHE_METRICS_PATH,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(verify_admin_access)],
)
async def get_cache_metrics(engine=Depends(get_cache_engine)) -> dict:
    """
    Current cache counters.

    The store size is re-read here, which for Redis means a key scan; the
    request path never pays for that.

    Raises:
        HTTPException: 404 when the engine runs with metrics disabled
    """
    snapshot = await engine.refresh_metrics()
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cache metrics are disabled",
        )
    logger.debug("cache_metrics_served", **snapshot.to_dict())
    return snapshot.to_dict()


@router.delete(
    "/cache/{key}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(verify_admin_access)],
)
async def invalidate_cache_entry(key: str, engine=Depends(get_cache_engine)) -> Response:
    """Evict one cache entry. Idempotent: unknown keys also return 204."""
    await engine.invalidate_cache(key)
    logger.info("cache_entry_invalidated", cache_key=key[:20])
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(PROMETHEUS_PATH, dependencies=[Depends(verify_admin_access)])
async def get_prometheus_metrics() -> Response:
    """Prometheus scrape endpoint."""
    payload, content_type = render_latest()
    return Response(content=payload, media_type=content_type)
