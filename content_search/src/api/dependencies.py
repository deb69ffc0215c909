"""Shared FastAPI dependencies for the API routers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, Request

from ..services.search_service import SearchService


def get_search_service(request: Request) -> SearchService:
    """Return the service the application built at startup."""
    return request.app.state.search_service


SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


__all__ = ["SearchServiceDep", "get_search_service", "utc_timestamp"]
