"""FastAPI middleware for CORS, credentials and error handling."""

from .cors import CORSHeadersMiddleware, setup_cors
from .credentials import SourceCredentialsMiddleware, setup_source_credentials
from .error_handlers import (
    UnhandledErrorMiddleware,
    content_search_exception_handler,
    error_response,
    http_exception_handler,
    register_error_handlers,
    validation_exception_handler,
)

__all__ = [
    "CORSHeadersMiddleware",
    "setup_cors",
    "SourceCredentialsMiddleware",
    "setup_source_credentials",
    "register_error_handlers",
    "error_response",
    "validation_exception_handler",
    "http_exception_handler",
    "content_search_exception_handler",
    "UnhandledErrorMiddleware",
]
