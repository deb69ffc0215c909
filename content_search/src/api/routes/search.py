"""HTTP API routes for keyword search and recommendations."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from ...models.search import SearchRequest, SearchResponse
from ..dependencies import SearchServiceDep, utc_timestamp

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/search", response_model=SearchResponse)
async def search_content(request: SearchRequest, service: SearchServiceDep):
    """Ranked keyword matches scoring above zero."""
    results = await service.search(request)
    logger.info(
        "Search completed",
        extra={"query": request.query.strip(), "results": len(results)},
    )
    return SearchResponse(
        results=results,
        total_results=len(results),
        query=request.query.strip(),
        timestamp=utc_timestamp(),
    )


@router.post("/api/recommendations", response_model=SearchResponse)
async def recommend_content(request: SearchRequest, service: SearchServiceDep):
    """Top-N related items regardless of score."""
    results = await service.recommend(request)
    return SearchResponse(
        results=results,
        total_results=len(results),
        query=request.query.strip(),
        timestamp=utc_timestamp(),
    )
