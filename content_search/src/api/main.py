"""FastAPI application main entry point."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv()

from .middleware import register_error_handlers, setup_cors, setup_source_credentials
from .routes import cache, search
from ..services.config import get_config
from ..services.search_service import SearchService

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the search service for this process and close it on shutdown."""
    service = SearchService(get_config())
    app.state.search_service = service
    logger.info("Content search API starting")
    try:
        yield
    finally:
        await service.aclose()
    logger.info("Content search API stopped")


app = FastAPI(
    title="Content Search API",
    description="Fuzzy search and recommendations over portfolio markdown content",
    version="0.1.0",
    lifespan=lifespan,
)

register_error_handlers(app)
setup_source_credentials(app)
setup_cors(app)

app.include_router(search.router, tags=["search"])
app.include_router(cache.router, tags=["cache"])


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


__all__ = ["app"]
