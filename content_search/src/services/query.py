"""Keyword search and recommendation ranking over an in-memory index.

Both entry points are pure functions of the request and the item list.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from ..models.content import ContentItem, ContentSummary
from ..models.search import SearchRequest
from .errors import ValidationError

MIN_QUERY_LENGTH = 2
DEFAULT_SEARCH_RESULTS = 10
DEFAULT_RECOMMENDATION_RESULTS = 5

TITLE_WEIGHT = 100
DESCRIPTION_WEIGHT = 50
TAG_WEIGHT = 30
KEYWORD_WEIGHT = 20
HEADING_WEIGHT = 25
CONTENT_WEIGHT = 10

TAG_SIMILARITY_WEIGHT = 50
QUERY_WORD_SIMILARITY_WEIGHT = 30
CATEGORY_MATCH_BONUS = 20
MAX_SIMILARITY_SCORE = 100
MIN_QUERY_WORD_LENGTH = 3


def tags_overlap(requested: str, item_tag: str) -> bool:
    """Case-insensitive substring containment in either direction."""
    requested = requested.lower()
    item_tag = item_tag.lower()
    return requested in item_tag or item_tag in requested


def _any_tag_matches(requested: str, item_tags: Iterable[str]) -> bool:
    return any(tags_overlap(requested, item_tag) for item_tag in item_tags)


def filter_candidates(
    items: Sequence[ContentItem], request: SearchRequest, *, filter_tags: bool
) -> List[ContentItem]:
    """Apply the content type, tag and excluded URL filters, keeping input order."""
    candidates = list(items)
    if request.content_type != "all":
        candidates = [item for item in candidates if item.content_type == request.content_type]
    if filter_tags and request.tags:
        candidates = [
            item
            for item in candidates
            if any(_any_tag_matches(tag, item.tags) for tag in request.tags)
        ]
    if request.exclude_url:
        candidates = [item for item in candidates if item.url != request.exclude_url]
    return candidates


def score_search_match(query: str, item: ContentItem) -> int:
    """Additive weighted substring score of ``query`` against one item."""
    needle = query.lower()
    score = 0
    if needle in item.title.lower():
        score += TITLE_WEIGHT
    if needle in item.description.lower():
        score += DESCRIPTION_WEIGHT
    score += TAG_WEIGHT * sum(1 for tag in item.tags if needle in tag.lower())
    score += KEYWORD_WEIGHT * sum(1 for keyword in item.search_keywords if needle in keyword.lower())
    score += HEADING_WEIGHT * sum(1 for heading in item.headings if needle in heading.lower())
    if needle in item.content.lower():
        score += CONTENT_WEIGHT
    return score


def score_similarity(query: str, tags: Sequence[str], item: ContentItem) -> float:
    """
    Recommendation score in the range 0..100.

    Fractions use a denominator floored at 1, so an empty tag list or an
    empty query contributes nothing instead of dividing by zero.
    """
    matched_tags = sum(1 for tag in tags if _any_tag_matches(tag, item.tags))
    score = (matched_tags / max(len(tags), 1)) * TAG_SIMILARITY_WEIGHT

    query_words = query.lower().split()
    haystack = f"{item.title} {item.description} {item.content}".lower()
    matched_words = sum(
        1 for word in query_words if len(word) >= MIN_QUERY_WORD_LENGTH and word in haystack
    )
    score += (matched_words / max(len(query_words), 1)) * QUERY_WORD_SIMILARITY_WEIGHT

    if item.category:
        category = item.category.lower()
        if any(tag.lower() in category for tag in tags):
            score += CATEGORY_MATCH_BONUS

    return min(score, MAX_SIMILARITY_SCORE)


def _rank(scored: List[Tuple[float, ContentItem]], limit: int) -> List[ContentSummary]:
    # sorted() is stable, so equal scores keep their input order.
    ranked = sorted(scored, key=lambda pair: pair[0], reverse=True)
    return [item.to_summary() for _, item in ranked[:limit]]


def validate_search_query(request: SearchRequest) -> str:
    """Return the trimmed query or raise ValidationError when it is too short."""
    query = request.query.strip()
    if len(query) < MIN_QUERY_LENGTH:
        raise ValidationError("Search query must be at least 2 characters long")
    return query


def search(request: SearchRequest, items: Sequence[ContentItem]) -> List[ContentSummary]:
    """Keyword search; only items scoring above zero are returned."""
    query = validate_search_query(request)

    candidates = filter_candidates(items, request, filter_tags=True)
    scored = [(score_search_match(query, item), item) for item in candidates]
    scored = [(score, item) for score, item in scored if score > 0]
    return _rank(scored, request.max_results or DEFAULT_SEARCH_RESULTS)


def recommend(request: SearchRequest, items: Sequence[ContentItem]) -> List[ContentSummary]:
    """Top-N similar items; no minimum query length and no score threshold."""
    query = request.query.strip()
    candidates = filter_candidates(items, request, filter_tags=False)
    scored = [(score_similarity(query, request.tags, item), item) for item in candidates]
    return _rank(scored, request.max_results or DEFAULT_RECOMMENDATION_RESULTS)


__all__ = [
    "search",
    "recommend",
    "validate_search_query",
    "filter_candidates",
    "score_search_match",
    "score_similarity",
    "tags_overlap",
    "DEFAULT_SEARCH_RESULTS",
    "DEFAULT_RECOMMENDATION_RESULTS",
]
