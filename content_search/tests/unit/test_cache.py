"""Tests for the SQLite key-value store and the content cache built on it."""

import json
from pathlib import Path

import pytest

from content_search.src.models.content import ContentItem
from content_search.src.services.cache import (
    CACHE_METADATA_KEY,
    CONTENT_ITEMS_KEY,
    LAST_UPDATE_KEY,
    ContentCache,
)
from content_search.src.services.database import KeyValueStore

T0 = 1_700_000_000.0


class FakeClock:
    def __init__(self, now: float = T0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(tmp_path: Path, clock: FakeClock) -> KeyValueStore:
    return KeyValueStore(tmp_path / "cache.db", clock=clock)


@pytest.fixture()
def cache(store: KeyValueStore) -> ContentCache:
    return ContentCache(store, ttl_seconds=1800, retention_seconds=86400)


def _item(item_id: str, title: str) -> ContentItem:
    return ContentItem(
        id=item_id,
        title=title,
        url=f"/blog/{item_id}",
        content_type="blog",
        content="body",
        search_keywords=["body"],
    )


class TestKeyValueStore:
    def test_schema_created_on_first_use(self, tmp_path: Path):
        fresh = KeyValueStore(tmp_path / "nested" / "fresh.db")

        assert fresh.get("missing") is None
        fresh.put("key", "value")
        assert fresh.get("key") == "value"

    def test_put_get_delete(self, store: KeyValueStore):
        store.put("key", "value")

        assert store.get("key") == "value"

        store.delete("key")

        assert store.get("key") is None

    def test_expired_entries_read_as_missing(self, store: KeyValueStore, clock: FakeClock):
        store.put("key", "value", ttl_seconds=10)

        clock.now = T0 + 9
        assert store.get("key") == "value"

        clock.now = T0 + 10
        assert store.get("key") is None

    def test_put_overwrites(self, store: KeyValueStore):
        store.put("key", "one")
        store.put("key", "two")

        assert store.get("key") == "two"


class TestContentCache:
    def test_get_respects_ttl_boundary(self, cache: ContentCache, clock: FakeClock):
        cache.put([_item("a", "Alpha")])

        clock.now = T0 + 1799
        cached = cache.get()
        assert cached is not None
        assert [item.title for item in cached] == ["Alpha"]

        clock.now = T0 + 1801
        assert cache.get() is None

    def test_get_stale_ignores_ttl(self, cache: ContentCache, clock: FakeClock):
        cache.put([_item("a", "Alpha")])

        clock.now = T0 + 3600

        assert cache.get() is None
        stale = cache.get_stale()
        assert stale is not None
        assert stale[0].search_keywords == ["body"]

    def test_get_on_empty_store_is_miss(self, cache: ContentCache):
        assert cache.get() is None
        assert cache.get_stale() is None

    def test_put_replaces_whole_generation(self, cache: ContentCache):
        cache.put([_item("a", "Alpha"), _item("b", "Beta")])
        cache.put([_item("c", "Gamma")])

        assert [item.id for item in cache.get()] == ["c"]

    def test_put_writes_timestamp_last(self, store: KeyValueStore, clock: FakeClock):
        writes = []
        original_put = store.put

        def recording_put(key, value, *, ttl_seconds=None):
            writes.append(key)
            original_put(key, value, ttl_seconds=ttl_seconds)

        store.put = recording_put
        ContentCache(store).put([_item("a", "Alpha")])

        assert writes[-1] == LAST_UPDATE_KEY
        assert set(writes) == {CONTENT_ITEMS_KEY, CACHE_METADATA_KEY, LAST_UPDATE_KEY}

    def test_metadata_and_map_layout(self, cache: ContentCache, store: KeyValueStore):
        cache.put([_item("a", "Alpha")])

        metadata = json.loads(store.get(CACHE_METADATA_KEY))
        content_map = json.loads(store.get(CONTENT_ITEMS_KEY))

        assert metadata == {"itemCount": 1, "lastUpdate": T0, "ttl": 1800}
        assert content_map["a"]["contentType"] == "blog"
        assert content_map["a"]["searchKeywords"] == ["body"]

    def test_stats_does_not_mutate(self, cache: ContentCache):
        empty = cache.stats()
        assert empty.size == 0
        assert empty.last_update == "1970-01-01T00:00:00+00:00"
        assert empty.ttl == 1800

        cache.put([_item("a", "Alpha"), _item("b", "Beta")])
        stats = cache.stats()

        assert stats.size == 2
        assert stats.last_update == "2023-11-14T22:13:20+00:00"
        assert cache.stats() == stats

    def test_invalidate_clears_all_keys(self, cache: ContentCache, store: KeyValueStore):
        cache.put([_item("a", "Alpha")])

        cache.invalidate()

        assert cache.get() is None
        assert cache.get_stale() is None
        assert store.get(CACHE_METADATA_KEY) is None

    def test_rejects_retention_shorter_than_ttl(self, store: KeyValueStore):
        with pytest.raises(ValueError):
            ContentCache(store, ttl_seconds=100, retention_seconds=10)
