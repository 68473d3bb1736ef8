"""CORS headers for media clients.

Preflight requests never carry the application's bearer credential, and
native media elements read ``Content-Range`` and friends, so every media
response states its CORS policy explicitly rather than relying on a
client-specific workaround.
"""

from fastapi import HTTPException, Request, Response
from fastapi.exception_handlers import http_exception_handler

MEDIA_METHODS = "GET, HEAD, OPTIONS"
ALLOWED_HEADERS = "Authorization, Content-Type, Range"
EXPOSED_HEADERS = "Content-Type, Content-Length, Content-Range, Accept-Ranges"


def cors_headers(
    origin: str | None,
    *,
    methods: str | None = MEDIA_METHODS,
    max_age: int | None = None,
) -> dict[str, str]:
    """Build CORS response headers, echoing the request origin when present."""
    headers = {
        "Access-Control-Allow-Origin": origin or "*",
        "Access-Control-Expose-Headers": EXPOSED_HEADERS,
        "Vary": "Origin",
    }
    if methods is not None:
        headers["Access-Control-Allow-Methods"] = methods
        headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
    if max_age is not None:
        headers["Access-Control-Max-Age"] = str(max_age)
    return headers


def preflight_response(origin: str | None, *, methods: str, max_age: int) -> Response:
    return Response(
        status_code=204,
        headers=cors_headers(origin, methods=methods, max_age=max_age),
    )


async def cors_http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Render HTTP errors with CORS headers, and without a body for HEAD."""
    headers = {**cors_headers(request.headers.get("origin"), methods=None), **(exc.headers or {})}
    if request.method == "HEAD":
        return Response(status_code=exc.status_code, headers=headers)
    response = await http_exception_handler(request, exc)
    response.headers.update(headers)
    return response
