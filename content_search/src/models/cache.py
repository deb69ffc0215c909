"""Cache management models."""

from __future__ import annotations

from pydantic import Field

from .content import CamelModel


class CacheStats(CamelModel):
    """Read-only view of the stored cache generation."""

    size: int = Field(..., ge=0, description="Number of cached content items")
    last_update: str = Field(..., description="ISO-8601 build time of the generation")
    ttl: int = Field(..., ge=1, description="Generation validity in seconds")


class CacheStatsResponse(CamelModel):
    success: bool = True
    stats: CacheStats
    timestamp: str


class MessageResponse(CamelModel):
    success: bool = True
    message: str
    timestamp: str


__all__ = ["CacheStats", "CacheStatsResponse", "MessageResponse"]
