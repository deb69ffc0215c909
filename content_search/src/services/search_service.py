"""Content search service: cache-first index access plus query operations."""

from __future__ import annotations

import asyncio
import logging
from typing import List

from ..models.cache import CacheStats
from ..models.content import ContentItem, ContentSummary
from ..models.search import SearchRequest
from .cache import ContentCache
from .config import AppConfig, get_config
from .database import KeyValueStore
from .errors import SourceUnavailable
from .indexer import ContentIndexer, ContentSource
from .query import recommend, search, validate_search_query
from .source import GitHubContentSource
from .tasks import spawn_detached

logger = logging.getLogger(__name__)


class SearchService:
    """
    Wire the source adapter, indexer and cache store together.

    Collaborators default to the production implementations built from
    ``config``; tests pass their own.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        source: ContentSource | None = None,
        cache: ContentCache | None = None,
        indexer: ContentIndexer | None = None,
    ) -> None:
        self.config = config or get_config()
        self.source = source or GitHubContentSource(self.config)
        self.cache = cache or ContentCache(
            KeyValueStore(self.config.cache_db_path),
            ttl_seconds=self.config.cache_ttl_seconds,
            retention_seconds=self.config.cache_retention_seconds,
        )
        self.indexer = indexer or ContentIndexer(
            self.source,
            batch_size=self.config.index_batch_size,
            content_root=self.config.content_path,
        )

    async def rebuild_index(self) -> List[ContentItem]:
        """Run a full index pass and store it when it produced anything."""
        items = await self.indexer.build_index()
        if items:
            self.cache.put(items)
        else:
            logger.warning("Index pass produced no items; cache left unchanged")
        return items

    async def get_all_content_items(self) -> List[ContentItem]:
        """
        Return the current index.

        Serves a fresh cached generation when there is one, otherwise
        rebuilds. If the source cannot be listed, an expired generation is
        served instead; with nothing stored the error propagates.
        """
        cached = self.cache.get()
        if cached is not None:
            return cached

        try:
            return await self.rebuild_index()
        except SourceUnavailable:
            stale = self.cache.get_stale()
            if stale is None:
                raise
            logger.warning(
                "Content source unavailable; serving stale cache",
                extra={"items": len(stale)},
            )
            return stale

    async def search(self, request: SearchRequest) -> List[ContentSummary]:
        validate_search_query(request)
        return search(request, await self.get_all_content_items())

    async def recommend(self, request: SearchRequest) -> List[ContentSummary]:
        return recommend(request, await self.get_all_content_items())

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    async def prewarm(self) -> None:
        items = await self.rebuild_index()
        logger.info("Cache pre-warmed", extra={"items": len(items)})

    def start_prewarm(self) -> asyncio.Task[None]:
        """Kick off a prewarm without waiting for it."""
        return spawn_detached(self.prewarm(), name="cache-prewarm")

    def clear_cache(self) -> None:
        self.cache.invalidate()

    async def aclose(self) -> None:
        close = getattr(self.source, "aclose", None)
        if close is not None:
            await close()


__all__ = ["SearchService"]
