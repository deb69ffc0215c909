"""Indexed content models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ContentType = Literal["blog", "portfolio", "project", "page"]
ContentTypeFilter = Literal["blog", "portfolio", "project", "page", "all"]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContentSummary(CamelModel):
    """Display-safe view of an indexed document returned to callers."""

    id: str
    title: str
    description: str = ""
    display_content: str = ""
    tags: list[str] = Field(default_factory=list)
    url: str
    content_type: ContentType
    category: Optional[str] = None
    headings: list[str] = Field(default_factory=list)
    last_modified: Optional[str] = None


class ContentItem(ContentSummary):
    """A single indexed document."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "3f1c2a9",
                "title": "Military Leadership: Be Know Do",
                "description": "Lessons from the Army leadership model",
                "content": "# Be\n\nCharacter comes first...",
                "displayContent": "# Be Character comes first...",
                "tags": ["leadership", "military"],
                "url": "/blog/military-leadership",
                "contentType": "blog",
                "category": "Leadership & Culture",
                "headings": ["Be"],
                "searchKeywords": ["leadership", "military", "character", "comes", "first"],
                "lastModified": "https://api.github.com/repos/acme/site/contents/...",
            }
        },
    )

    content: str = Field("", description="Full markdown body, used for matching only")
    search_keywords: list[str] = Field(
        default_factory=list,
        description="Derived lowercase tokens; regenerated from the other fields",
    )

    def to_summary(self) -> ContentSummary:
        return ContentSummary.model_validate(
            self.model_dump(exclude={"content", "search_keywords"})
        )


__all__ = ["CamelModel", "ContentItem", "ContentSummary", "ContentType", "ContentTypeFilter"]
