"""Error taxonomy shared by the content search services."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class ContentSearchError(Exception):
    """Base class for errors that map onto an HTTP status and a client message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: Optional[str] = None

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def client_message(self) -> str:
        return self.message


class ValidationError(ContentSearchError):
    """Request failed validation (query too short, malformed body)."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ContentSearchError):
    """A single source object does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class TransportError(ContentSearchError):
    """A remote call to the content source failed (network, auth, rate limit)."""

    status_code = status.HTTP_502_BAD_GATEWAY

    @property
    def client_message(self) -> str:
        return "Content source request failed"


class SourceUnavailable(ContentSearchError):
    """The content listing itself could not be retrieved."""

    @property
    def client_message(self) -> str:
        return "Content source unavailable"


class ConfigurationError(ContentSearchError):
    """Required upstream credentials or settings are missing."""


class EtagConflict(ContentSearchError):
    """Optimistic concurrency check failed on a content write."""

    status_code = status.HTTP_409_CONFLICT
    code = "etag_conflict"


__all__ = [
    "ContentSearchError",
    "ValidationError",
    "NotFound",
    "TransportError",
    "SourceUnavailable",
    "ConfigurationError",
    "EtagConflict",
]
