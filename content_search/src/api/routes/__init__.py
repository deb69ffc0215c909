"""HTTP API route handlers."""

from . import cache, search

__all__ = ["cache", "search"]
