"""Service layer for content indexing, caching and search."""

from .cache import ContentCache
from .config import AppConfig, get_config, reload_config
from .database import KeyValueStore
from .errors import (
    ConfigurationError,
    ContentSearchError,
    EtagConflict,
    NotFound,
    SourceUnavailable,
    TransportError,
    ValidationError,
)
from .indexer import ContentIndexer, build_content_item
from .search_service import SearchService
from .source import GitHubContentSource, SourceDocument
from .tasks import spawn_detached

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "KeyValueStore",
    "ContentCache",
    "ContentIndexer",
    "build_content_item",
    "GitHubContentSource",
    "SourceDocument",
    "SearchService",
    "spawn_detached",
    "ContentSearchError",
    "ValidationError",
    "NotFound",
    "TransportError",
    "SourceUnavailable",
    "ConfigurationError",
    "EtagConflict",
]
