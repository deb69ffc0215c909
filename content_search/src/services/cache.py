"""Generation-stamped cache of the content index."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from typing import Dict, List, Optional

from ..models.cache import CacheStats
from ..models.content import ContentItem
from .database import KeyValueStore

logger = logging.getLogger(__name__)

CONTENT_ITEMS_KEY = "content_items"
LAST_UPDATE_KEY = "last_update"
CACHE_METADATA_KEY = "cache_metadata"
EPOCH_ISO = datetime.fromtimestamp(0, tz=timezone.utc).isoformat()


def _iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


class ContentCache:
    """
    Store exactly one index generation under three KV keys.

    A generation is valid while ``now - last_update < ttl``. Entries are kept
    for ``retention`` seconds so an expired generation can still be served
    as a fallback when a rebuild fails.
    """

    def __init__(self, store: KeyValueStore, *, ttl_seconds: int = 1800, retention_seconds: int = 86400) -> None:
        if retention_seconds < ttl_seconds:
            raise ValueError("retention_seconds must be >= ttl_seconds")
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.retention_seconds = retention_seconds

    def _read_items(self) -> Optional[List[ContentItem]]:
        raw = self.store.get(CONTENT_ITEMS_KEY)
        if raw is None:
            return None
        content_map: Dict[str, dict] = json.loads(raw)
        return [ContentItem.model_validate(entry) for entry in content_map.values()]

    def _read_last_update(self) -> Optional[float]:
        raw = self.store.get(LAST_UPDATE_KEY)
        if raw is None:
            return None
        try:
            return float(raw)
        except ValueError:
            logger.warning("Ignoring malformed cache timestamp", extra={"value": raw})
            return None

    def get(self) -> Optional[List[ContentItem]]:
        """Return the cached items while the generation is fresh, else None."""
        last_update = self._read_last_update()
        if last_update is None:
            return None
        if self.store.clock() - last_update >= self.ttl_seconds:
            return None
        items = self._read_items()
        if items is not None:
            logger.info("Returning cached items", extra={"items": len(items)})
        return items

    def get_stale(self) -> Optional[List[ContentItem]]:
        """Return whatever generation is stored, ignoring freshness."""
        return self._read_items()

    def put(self, items: List[ContentItem]) -> None:
        """
        Replace the stored generation.

        Items and metadata are written before the timestamp, so a reader never
        sees a fresh timestamp without the matching items.
        """
        now = self.store.clock()
        content_map = {item.id: item.model_dump(mode="json", by_alias=True) for item in items}
        metadata = {"itemCount": len(items), "lastUpdate": now, "ttl": self.ttl_seconds}

        self.store.put(CONTENT_ITEMS_KEY, json.dumps(content_map), ttl_seconds=self.retention_seconds)
        self.store.put(CACHE_METADATA_KEY, json.dumps(metadata), ttl_seconds=self.retention_seconds)
        self.store.put(LAST_UPDATE_KEY, repr(now), ttl_seconds=self.retention_seconds)
        logger.info("Cached content generation", extra={"items": len(items)})

    def stats(self) -> CacheStats:
        raw = self.store.get(CONTENT_ITEMS_KEY)
        size = len(json.loads(raw)) if raw is not None else 0
        last_update = self._read_last_update()
        return CacheStats(
            size=size,
            last_update=_iso(last_update) if last_update is not None else EPOCH_ISO,
            ttl=self.ttl_seconds,
        )

    def invalidate(self) -> None:
        """Delete the stored generation; the timestamp goes first."""
        for key in (LAST_UPDATE_KEY, CONTENT_ITEMS_KEY, CACHE_METADATA_KEY):
            self.store.delete(key)
        logger.info("Content cache cleared")


__all__ = ["ContentCache", "CONTENT_ITEMS_KEY", "LAST_UPDATE_KEY", "CACHE_METADATA_KEY"]
