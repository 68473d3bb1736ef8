from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Header, Response, status
from lagom import Container

from application.dtos.download_dtos import DownloadVideoRequest, DownloadVideoResponse
from application.use_cases.acquisition_use_cases import AcquireVideoUseCase
from infrastructure.config import settings
from interfaces.api.middleware import cors_headers, handle_use_case_errors, preflight_response
from interfaces.dependencies import get_container

logger = structlog.get_logger()

router = APIRouter(prefix="/download-video", tags=["acquisition"])

DOWNLOAD_METHODS = "POST, OPTIONS"


@router.options("")
async def download_preflight(origin: Annotated[str | None, Header()] = None) -> Response:
    return preflight_response(
        origin,
        methods=DOWNLOAD_METHODS,
        max_age=settings.cors_max_age_seconds,
    )


@router.post("", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def download_video(
    request: DownloadVideoRequest,
    response: Response,
    container: Annotated[Container, Depends(get_container)],
    authorization: Annotated[str | None, Header()] = None,
    origin: Annotated[str | None, Header()] = None,
) -> DownloadVideoResponse:
    """Download a YouTube or Instagram video and store it for the caller.

    Returns:
        200 OK: ``video_file_path`` and ``size`` of the stored object
        400 Bad Request: Missing/unsupported URL or oversized video
        401 Unauthorized: Missing or invalid token
        404 Not Found: Video unavailable at the source
        429 Too Many Requests: Source kept rate limiting

    """
    response.headers.update(cors_headers(origin, methods=DOWNLOAD_METHODS))
    use_case = container[AcquireVideoUseCase]
    return await use_case.execute(request, authorization=authorization)
