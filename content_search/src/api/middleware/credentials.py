"""Reject API calls early when the content source token is missing."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from starlette.types import ASGIApp, Receive, Scope, Send

from ...services.errors import ConfigurationError
from .error_handlers import error_response

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"
MISSING_TOKEN_MESSAGE = "GitHub token not configured"


def source_token_configured(scope: Scope) -> bool:
    app = scope.get("app")
    service = getattr(getattr(app, "state", None), "search_service", None)
    return bool(service is not None and service.config.github_token)


class SourceCredentialsMiddleware:
    """
    Fail every ``/api/`` request with 500 before routing when no token is set.

    Runs before the body is read, so a malformed request still gets the
    credential error. Preflight requests are answered by the CORS layer
    outside this one.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if (
            scope["type"] == "http"
            and scope["method"] != "OPTIONS"
            and scope["path"].startswith(API_PREFIX)
            and not source_token_configured(scope)
        ):
            error = ConfigurationError(MISSING_TOKEN_MESSAGE)
            logger.error("Rejected request: %s", error.message, extra={"path": scope["path"]})
            response = error_response(error.status_code, error.client_message)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)


def setup_source_credentials(app: FastAPI) -> None:
    """Install the credential gate; add it before the CORS layer."""
    app.add_middleware(SourceCredentialsMiddleware)


__all__ = ["SourceCredentialsMiddleware", "setup_source_credentials", "source_token_configured"]
