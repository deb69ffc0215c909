"""Pydantic models for data validation and serialization."""

from .cache import CacheStats, CacheStatsResponse, MessageResponse
from .content import CamelModel, ContentItem, ContentSummary, ContentType, ContentTypeFilter
from .search import ErrorResponse, SearchRequest, SearchResponse

__all__ = [
    "CamelModel",
    "ContentItem",
    "ContentSummary",
    "ContentType",
    "ContentTypeFilter",
    "SearchRequest",
    "SearchResponse",
    "ErrorResponse",
    "CacheStats",
    "CacheStatsResponse",
    "MessageResponse",
]
