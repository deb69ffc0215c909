"""Permissive CORS for the public search endpoints."""

from __future__ import annotations

import logging
from typing import List, Set

from fastapi import FastAPI
from starlette.routing import Match
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_METHODS = "GET, POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


def allowed_methods_for(scope: Scope) -> str:
    """List the methods routed at the request path, plus OPTIONS."""
    app = scope.get("app")
    methods: Set[str] = set()
    for route in getattr(app, "routes", []):
        route_methods = getattr(route, "methods", None)
        if not route_methods:
            continue
        match, _ = route.matches(scope)
        if match != Match.NONE:
            methods.update(route_methods)
    methods.discard("HEAD")
    methods.discard("OPTIONS")
    if not methods:
        return DEFAULT_ALLOWED_METHODS
    ordered: List[str] = sorted(methods)
    ordered.append("OPTIONS")
    return ", ".join(ordered)


class CORSHeadersMiddleware:
    """
    Add CORS headers to every response and answer every preflight.

    ``OPTIONS`` requests get an empty 200 before routing, so no other
    middleware or dependency can reject them.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    def _headers(self, scope: Scope) -> List[tuple[bytes, bytes]]:
        return [
            (b"access-control-allow-origin", b"*"),
            (b"access-control-allow-methods", allowed_methods_for(scope).encode("latin-1")),
            (b"access-control-allow-headers", ALLOWED_HEADERS.encode("latin-1")),
        ]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        cors_headers = self._headers(scope)

        if scope["method"] == "OPTIONS":
            await send(
                {
                    "type": "http.response.start",
                    "status": 200,
                    "headers": [*cors_headers, (b"content-length", b"0")],
                }
            )
            await send({"type": "http.response.body", "body": b""})
            return

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                names = {name for name, _ in cors_headers}
                headers = [
                    (name, value)
                    for name, value in message.get("headers", [])
                    if name.lower() not in names
                ]
                message["headers"] = headers + cors_headers
            await send(message)

        await self.app(scope, receive, send_wrapper)


def setup_cors(app: FastAPI) -> None:
    """Install the CORS middleware as the outermost application layer."""
    app.add_middleware(CORSHeadersMiddleware)
    logger.info("CORS configured for all origins")


__all__ = ["CORSHeadersMiddleware", "allowed_methods_for", "setup_cors"]
