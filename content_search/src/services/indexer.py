"""Build the in-memory content index from the source repository."""

from __future__ import annotations

import asyncio
import hashlib
import logging
from pathlib import PurePosixPath
import time
from typing import Iterator, List, Protocol, Sequence, Set

from ..models.content import ContentItem
from .errors import SourceUnavailable, TransportError
from .parser import (
    DEFAULT_PORTFOLIO_CATEGORY,
    attribute_list,
    attribute_text,
    category_from_tags,
    clean_content_string,
    clean_markdown_content,
    content_type_from_path,
    extract_headings,
    generate_search_keywords,
    parse_frontmatter,
    title_from_path,
    url_from_path,
)
from .source import SourceDocument

logger = logging.getLogger(__name__)


class ContentSource(Protocol):
    async def list_content_paths(self) -> List[str]: ...

    async def fetch_raw(self, path: str) -> SourceDocument: ...


def _chunks(paths: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(paths), size):
        yield paths[start : start + size]


def _fallback_id(document: SourceDocument) -> str:
    digest = hashlib.sha1(f"{document.path}\n{document.text}".encode("utf-8"))
    return digest.hexdigest()


def build_content_item(document: SourceDocument, content_root: str = "") -> ContentItem:
    """Turn one decoded source document into a ContentItem."""
    attributes, body = parse_frontmatter(document.text)
    content_type = content_type_from_path(document.path, content_root)
    file_name = PurePosixPath(document.path).stem

    tags = [clean_content_string(tag) for tag in attribute_list(attributes, "tags", "tag")]
    tags = [tag for tag in tags if tag]

    category = attribute_text(attributes, "category", "section")
    if category:
        category = clean_content_string(category) or None
    if not category:
        category = category_from_tags(tags, file_name)
    if not category and content_type == "portfolio":
        category = DEFAULT_PORTFOLIO_CATEGORY

    headings = extract_headings(body)
    title = clean_content_string(attribute_text(attributes, "title") or title_from_path(document.path))
    description = clean_content_string(attribute_text(attributes, "description", "excerpt"))

    return ContentItem(
        id=document.sha or _fallback_id(document),
        title=title or title_from_path(document.path),
        description=description,
        content=body,
        display_content=clean_markdown_content(body),
        tags=tags,
        url=url_from_path(document.path, content_type, content_root),
        content_type=content_type,
        category=category,
        headings=headings,
        search_keywords=generate_search_keywords(
            {"tags": tags, "category": category or ""}, body, headings
        ),
        last_modified=document.version_ref or None,
    )


class ContentIndexer:
    """Fetch and parse every indexable document in bounded concurrent batches."""

    def __init__(self, source: ContentSource, *, batch_size: int = 10, content_root: str = "") -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.source = source
        self.batch_size = batch_size
        self.content_root = content_root

    async def process_file(self, path: str) -> ContentItem:
        document = await self.source.fetch_raw(path)
        return build_content_item(document, self.content_root)

    async def build_index(self) -> List[ContentItem]:
        """
        Run one full index pass.

        A failing file is logged and skipped; only a failed listing aborts the
        pass, as SourceUnavailable. Result order follows batch completion.
        """
        start_time = time.time()
        try:
            paths = await self.source.list_content_paths()
        except TransportError as exc:
            raise SourceUnavailable(f"Could not list content: {exc.message}") from exc

        items: List[ContentItem] = []
        seen_ids: Set[str] = set()
        batches = list(_chunks(paths, self.batch_size))

        for batch_number, batch in enumerate(batches, start=1):
            logger.info(
                "Processing batch",
                extra={"batch": batch_number, "batches": len(batches), "files": len(batch)},
            )
            results = await asyncio.gather(
                *(self.process_file(path) for path in batch), return_exceptions=True
            )
            for path, result in zip(batch, results):
                if isinstance(result, Exception):
                    logger.warning(
                        "Failed to process file",
                        extra={"path": path, "error": repr(result)},
                    )
                    continue
                if isinstance(result, BaseException):
                    raise result
                if result.id in seen_ids:
                    result = result.model_copy(
                        update={"id": hashlib.sha1(f"{result.id}:{path}".encode("utf-8")).hexdigest()}
                    )
                seen_ids.add(result.id)
                items.append(result)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Index pass complete",
            extra={
                "items": len(items),
                "files": len(paths),
                "duration_ms": f"{duration_ms:.2f}",
            },
        )
        return items


__all__ = ["ContentIndexer", "ContentSource", "build_content_item"]
