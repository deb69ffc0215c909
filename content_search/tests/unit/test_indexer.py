"""Tests for building ContentItems and the batched index pass."""

import asyncio
from typing import Dict, List

import pytest

from content_search.src.services.errors import NotFound, SourceUnavailable, TransportError
from content_search.src.services.indexer import ContentIndexer, build_content_item
from content_search.src.services.source import SourceDocument


class FakeSource:
    """In-memory content source that records fetch concurrency."""

    def __init__(self, documents: Dict[str, str], *, failing: Dict[str, Exception] | None = None):
        self.documents = documents
        self.failing = failing or {}
        self.list_error: Exception | None = None
        self.in_flight = 0
        self.max_in_flight = 0

    async def list_content_paths(self) -> List[str]:
        if self.list_error:
            raise self.list_error
        return list(self.documents) + list(self.failing)

    async def fetch_raw(self, path: str) -> SourceDocument:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if path in self.failing:
                raise self.failing[path]
            return SourceDocument(path=path, text=self.documents[path], sha=f"sha-{path}", version_ref="v1")
        finally:
            self.in_flight -= 1


LEADERSHIP_POST = """---
title: "Military Leadership: Be Know Do"
description: Lessons from the Army leadership model
tags: [leadership, military]
---
# Be

Character comes first in every leader.

## Know
"""


def test_build_content_item_from_frontmatter():
    document = SourceDocument(
        path="src/content/blog/military-leadership.md",
        text=LEADERSHIP_POST,
        sha="abc",
        version_ref="https://api.github.com/x",
    )

    item = build_content_item(document, "src/content")

    assert item.id == "abc"
    assert item.title == "Military Leadership: Be Know Do"
    assert item.description == "Lessons from the Army leadership model"
    assert item.tags == ["leadership", "military"]
    assert item.content_type == "blog"
    assert item.url == "/blog/military-leadership"
    assert item.category == "Leadership & Culture"
    assert item.headings == ["Be", "Know"]
    assert item.search_keywords[:2] == ["leadership", "military"]
    assert "character" in item.search_keywords
    assert item.last_modified == "https://api.github.com/x"
    assert item.display_content.startswith("# Be Character comes first")


def test_build_content_item_fallbacks_without_frontmatter():
    document = SourceDocument(
        path="src/content/portfolio/market_entry-plan.md",
        text="Plain body with no metadata.",
        sha="",
        version_ref="",
    )

    item = build_content_item(document, "src/content")

    assert item.title == "Market Entry Plan"
    assert item.description == ""
    assert item.tags == []
    assert item.content_type == "portfolio"
    assert item.category == "Strategy & Consulting"
    assert item.last_modified is None
    assert len(item.id) == 40


def test_build_content_item_prefers_explicit_category_and_aliases():
    text = "---\ntitle: Notes\nsection: Field Notes\nexcerpt: Short summary\ntag: devops\n---\nBody"
    document = SourceDocument(path="src/content/blog/notes.md", text=text, sha="s", version_ref="v")

    item = build_content_item(document, "src/content")

    assert item.category == "Field Notes"
    assert item.description == "Short summary"
    assert item.tags == ["devops"]


@pytest.mark.asyncio
async def test_build_index_skips_failing_files():
    source = FakeSource(
        {"blog/a.md": "---\ntitle: A\n---\nalpha", "blog/b.md": "---\ntitle: B\n---\nbeta"},
        failing={
            "blog/missing.md": NotFound("gone"),
            "blog/broken.md": TransportError("timeout"),
        },
    )
    indexer = ContentIndexer(source, batch_size=10)

    items = await indexer.build_index()

    assert sorted(item.title for item in items) == ["A", "B"]


@pytest.mark.asyncio
async def test_build_index_bounds_concurrency_by_batch_size():
    documents = {f"blog/post-{index}.md": f"body {index}" for index in range(7)}
    source = FakeSource(documents)
    indexer = ContentIndexer(source, batch_size=3)

    items = await indexer.build_index()

    assert len(items) == 7
    assert source.max_in_flight == 3


@pytest.mark.asyncio
async def test_build_index_listing_failure_is_source_unavailable():
    source = FakeSource({})
    source.list_error = TransportError("GitHub API error: 500")
    indexer = ContentIndexer(source)

    with pytest.raises(SourceUnavailable):
        await indexer.build_index()


@pytest.mark.asyncio
async def test_build_index_makes_duplicate_ids_unique():
    class SameShaSource(FakeSource):
        async def fetch_raw(self, path: str) -> SourceDocument:
            return SourceDocument(path=path, text="same", sha="dup", version_ref="v")

    source = SameShaSource({"blog/one.md": "", "blog/two.md": ""})
    indexer = ContentIndexer(source)

    items = await indexer.build_index()

    ids = [item.id for item in items]
    assert len(ids) == 2
    assert len(set(ids)) == 2
    assert "dup" in ids


def test_indexer_rejects_zero_batch_size():
    with pytest.raises(ValueError):
        ContentIndexer(FakeSource({}), batch_size=0)
