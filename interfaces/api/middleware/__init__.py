"""API middleware for error handling and cross-cutting concerns."""

from interfaces.api.middleware.cors import (
    cors_headers,
    cors_http_exception_handler,
    preflight_response,
)
from interfaces.api.middleware.error_handler import handle_use_case_errors

__all__ = [
    "cors_headers",
    "cors_http_exception_handler",
    "handle_use_case_errors",
    "preflight_response",
]
