"""Authenticated range proxy for stored drill videos and images."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Header, Query, Response, status
from fastapi.responses import StreamingResponse
from lagom import Container
from returns.result import Failure

from application.dtos.errors import AppError
from application.dtos.media_dtos import MediaRequest
from application.use_cases.media_use_cases import ServeMediaUseCase
from infrastructure.config import settings
from interfaces.api.middleware import cors_headers, preflight_response
from interfaces.api.middleware.cors import MEDIA_METHODS
from interfaces.api.routes.helpers import _map_app_error_to_http_exception
from interfaces.dependencies import get_container

logger = structlog.get_logger()

router = APIRouter(prefix=settings.media_mount_prefix, tags=["media"])


def _failure_response(error: AppError, headers: dict[str, str]) -> Response:
    if error.category == "range_not_satisfiable":
        return Response(
            status_code=status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE,
            headers={**headers, "Content-Range": f"bytes */{error.context['size_bytes']}"},
        )
    raise _map_app_error_to_http_exception(error)


async def _serve(container: Container, request: MediaRequest, origin: str | None) -> Response:
    use_case = container[ServeMediaUseCase]
    result = await use_case.execute(request)

    headers = cors_headers(origin)
    if isinstance(result, Failure):
        return _failure_response(result.failure(), headers)

    media = result.unwrap()
    headers.update(media.headers)
    if media.body is None:
        return Response(status_code=media.status_code, headers=headers)
    return StreamingResponse(media.body, status_code=media.status_code, headers=headers)


@router.options("/{object_path:path}")
async def media_preflight(
    object_path: str,  # noqa: ARG001
    origin: Annotated[str | None, Header()] = None,
) -> Response:
    """CORS preflight. Never authenticated: preflights carry no credential."""
    return preflight_response(
        origin,
        methods=MEDIA_METHODS,
        max_age=settings.cors_max_age_seconds,
    )


@router.get("/{object_path:path}")
async def get_media(
    object_path: str,
    container: Annotated[Container, Depends(get_container)],
    token: Annotated[str | None, Query()] = None,
    authorization: Annotated[str | None, Header()] = None,
    range_header: Annotated[str | None, Header(alias="range")] = None,
    origin: Annotated[str | None, Header()] = None,
) -> Response:
    """Stream a stored object, honouring a single byte range.

    Returns:
        200 OK: Whole object
        206 Partial Content: Requested span, capped to the chunk ceiling
        400 Bad Request: Invalid object path
        401 Unauthorized: Missing or invalid token
        404 Not Found: Object could not be resolved
        416 Range Not Satisfiable: Malformed or out-of-bounds range

    """
    request = MediaRequest(
        # the router prefix consumed exactly one separator
        raw_path=f"/{object_path}",
        authorization=authorization,
        token=token,
        range_header=range_header,
    )
    return await _serve(container, request, origin)


@router.head("/{object_path:path}")
async def head_media(
    object_path: str,
    container: Annotated[Container, Depends(get_container)],
    token: Annotated[str | None, Query()] = None,
    authorization: Annotated[str | None, Header()] = None,
    origin: Annotated[str | None, Header()] = None,
) -> Response:
    """Probe a stored object's size and type without fetching its bytes."""
    request = MediaRequest(
        raw_path=f"/{object_path}",
        authorization=authorization,
        token=token,
        include_body=False,
    )
    return await _serve(container, request, origin)
