import asyncio
import tempfile
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import urlsplit

import structlog
from returns.result import Failure, Result, Success

from application.dtos.download_dtos import DownloadVideoRequest, DownloadVideoResponse
from application.dtos.errors import AppError
from application.ports.object_store import ObjectStore
from application.ports.video_downloader import VideoDownloader
from application.use_cases.media_use_cases import BEARER_PREFIX, AuthenticateRequestUseCase
from domain.exceptions import DownloadError, InfrastructureError, RateLimitedError
from domain.value_objects.mime_type import MimeType

logger = structlog.get_logger()

DEFAULT_ALLOWED_DOMAINS = (
    "youtube.com",
    "www.youtube.com",
    "youtu.be",
    "www.youtu.be",
    "m.youtube.com",
    "music.youtube.com",
    "instagram.com",
    "www.instagram.com",
)
DEFAULT_MAX_FILE_BYTES = 50 * 1024 * 1024

_NOT_FOUND_MARKERS = ("not found", "unavailable")


class AcquireVideoUseCase:
    """Fetch a third-party video and store it under the caller's prefix.

    Only the Authorization header is accepted here; the query parameter
    fallback exists for media elements and does not apply to this endpoint.
    """

    def __init__(
        self,
        authenticate_request: AuthenticateRequestUseCase,
        object_store: ObjectStore,
        video_downloader: VideoDownloader,
        allowed_domains: Iterable[str] = DEFAULT_ALLOWED_DOMAINS,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
        missing_configuration: tuple[str, ...] = (),
    ) -> None:
        self.authenticate_request = authenticate_request
        self.object_store = object_store
        self.video_downloader = video_downloader
        self.allowed_domains = frozenset(allowed_domains)
        self.max_file_bytes = max_file_bytes
        self.missing_configuration = missing_configuration

    async def execute(
        self,
        request: DownloadVideoRequest,
        authorization: str | None,
    ) -> Result[DownloadVideoResponse, AppError]:
        if self.missing_configuration:
            logger.error("storage_configuration_missing", missing=list(self.missing_configuration))
            return Failure(AppError("configuration", "Missing storage configuration."))

        if not authorization or not authorization.startswith(BEARER_PREFIX):
            return Failure(AppError("unauthenticated", "Missing authorization token."))

        if not request.url:
            return Failure(AppError("validation", "URL is required."))

        try:
            host = urlsplit(request.url).hostname
        except ValueError:
            return Failure(AppError("validation", "URL is not valid."))
        if host not in self.allowed_domains:
            return Failure(AppError("validation", "URL host is not supported."))

        auth_result = await self.authenticate_request.execute(authorization=authorization)
        if isinstance(auth_result, Failure):
            return auth_result
        identity = auth_result.unwrap()

        try:
            with tempfile.TemporaryDirectory(prefix="yt-dlp-") as temp_dir:
                video_path = await self.video_downloader.download(request.url, Path(temp_dir))
                size = video_path.stat().st_size
                if size > self.max_file_bytes:
                    logger.warning(
                        "downloaded_video_too_large",
                        user_id=identity.user_id,
                        size=size,
                        max_file_bytes=self.max_file_bytes,
                    )
                    return Failure(AppError("validation", "Processed video exceeds size limit."))

                data = await asyncio.to_thread(video_path.read_bytes)
                extension = video_path.suffix or ".mp4"
                object_path = await self.object_store.store_object(
                    identity.user_id,
                    data,
                    MimeType.from_extension(extension).value,
                    extension=extension,
                )
        except RateLimitedError as e:
            logger.warning("video_download_rate_limited", user_id=identity.user_id, error=str(e))
            return Failure(
                AppError(
                    "rate_limited",
                    "Video source rate limit exceeded. Please try again in a few minutes.",
                ),
            )
        except DownloadError as e:
            logger.error("video_download_failed", user_id=identity.user_id, error=str(e))
            if any(marker in str(e).lower() for marker in _NOT_FOUND_MARKERS):
                return Failure(AppError("not_found", "Video not found or unavailable."))
            return Failure(AppError("download_error", "Failed to download video."))
        except InfrastructureError as e:
            logger.error("video_upload_failed", user_id=identity.user_id, error=str(e))
            return Failure(AppError("storage_error", "Failed to store video."))

        logger.info("video_acquired", user_id=identity.user_id, object_path=object_path, size=size)
        return Success(DownloadVideoResponse(video_file_path=object_path, size=size))
