"""HTTP API routes for cache management."""

from __future__ import annotations

from fastapi import APIRouter

from ...models.cache import CacheStatsResponse, MessageResponse
from ..dependencies import SearchServiceDep, utc_timestamp

router = APIRouter()


@router.get("/api/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(service: SearchServiceDep):
    """Introspect the stored generation without rebuilding it."""
    return CacheStatsResponse(stats=service.cache_stats(), timestamp=utc_timestamp())


@router.post("/api/cache/prewarm", response_model=MessageResponse)
async def prewarm_cache(service: SearchServiceDep):
    """Start an index rebuild in the background and return immediately."""
    service.start_prewarm()
    return MessageResponse(
        message="Cache pre-warming started in background", timestamp=utc_timestamp()
    )


@router.post("/api/cache/clear", response_model=MessageResponse)
async def clear_cache(service: SearchServiceDep):
    service.clear_cache()
    return MessageResponse(message="Cache cleared successfully", timestamp=utc_timestamp())
