"""FastAPI exception handlers rendering the ``{success: false, error}`` envelope."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ...models.search import ErrorResponse
from ...services.errors import ContentSearchError

logger = logging.getLogger(__name__)

INVALID_BODY_MESSAGE = "Invalid request body"
NOT_FOUND_MESSAGE = "Endpoint not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(status_code: int, message: str, code: Optional[str] = None) -> JSONResponse:
    payload = ErrorResponse(error=message, code=code)
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Rejected request body", extra={"path": request.url.path, "errors": exc.errors()})
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    # Unknown paths and unsupported methods are both "no such endpoint".
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    message = exc.detail if isinstance(exc.detail, str) and exc.detail else INTERNAL_ERROR_MESSAGE
    return error_response(exc.status_code, message)


async def content_search_exception_handler(
    request: Request, exc: ContentSearchError
) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "Request failed: %s",
            exc.message,
            extra={"path": request.url.path, "details": exc.details},
        )
    return error_response(exc.status_code, exc.client_message, exc.code)


class UnhandledErrorMiddleware:
    """Turn any exception escaping the app into a generic 500 envelope."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            logger.exception("Unhandled exception", extra={"path": scope.get("path")})
            if response_started:
                raise
            response = error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
            await response(scope, receive, send)


def register_error_handlers(app: FastAPI) -> None:
    """Attach shared exception handlers to the FastAPI application."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ContentSearchError, content_search_exception_handler)
    app.add_middleware(UnhandledErrorMiddleware)


__all__ = [
    "register_error_handlers",
    "error_response",
    "validation_exception_handler",
    "http_exception_handler",
    "content_search_exception_handler",
    "UnhandledErrorMiddleware",
]
