"""Search request/response models."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from .content import CamelModel, ContentSummary, ContentTypeFilter


class SearchRequest(CamelModel):
    """Query parameters shared by keyword search and recommendations."""

    query: str = ""
    content_type: ContentTypeFilter = "all"
    max_results: Optional[int] = Field(
        None, ge=1, description="Defaults to 10 for search and 5 for recommendations"
    )
    exclude_url: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("query", mode="before")
    @classmethod
    def _none_query_is_empty(cls, value: Optional[str]) -> str:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class SearchResponse(CamelModel):
    """Envelope for search and recommendation results."""

    success: bool = True
    results: list[ContentSummary]
    total_results: int
    query: str
    timestamp: str


class ErrorResponse(CamelModel):
    """Envelope for every failed request."""

    success: bool = False
    error: str
    code: Optional[str] = None


__all__ = ["SearchRequest", "SearchResponse", "ErrorResponse"]
