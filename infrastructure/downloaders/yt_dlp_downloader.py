from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path

import structlog

from application.policies.retry_policy import call_with_retry
from application.ports.video_downloader import VideoDownloader
from domain.exceptions import DownloadError, RateLimitedError
from domain.value_objects.retry_policy import RetryPolicy

log = structlog.get_logger(__name__)

VIDEO_FORMAT = "bestvideo[height<=360]+bestaudio/best[height<=360]/best[height<=360]"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
VIDEO_SUFFIXES = frozenset({".mp4", ".mkv", ".webm", ".mov"})
_RATE_LIMIT_MARKERS = ("429", "too many requests")

DEFAULT_DOWNLOAD_RETRY = RetryPolicy(
    maximum_attempts=4,
    initial_interval=2.0,
    backoff_coefficient=2.5,
    maximum_interval=10.0,
)


class YtDlpDownloader(VideoDownloader):
    """VideoDownloader adapter that shells out to the ``yt-dlp`` binary.

    Rate-limit failures are retried under ``retry_policy``; every other
    failure is raised on the first attempt.
    """

    def __init__(
        self,
        binary: str = "yt-dlp",
        retry_policy: RetryPolicy = DEFAULT_DOWNLOAD_RETRY,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._binary = binary
        self._retry_policy = retry_policy
        self._sleep = sleep

    def build_args(self, url: str, target_dir: Path) -> list[str]:
        return [
            url,
            "-f",
            VIDEO_FORMAT,
            "--merge-output-format",
            "mp4",
            "--no-playlist",
            "--user-agent",
            USER_AGENT,
            "--extractor-args",
            "youtube:player_client=android",
            "--output",
            str(target_dir / "%(id)s.%(ext)s"),
        ]

    async def download(self, url: str, target_dir: Path) -> Path:
        args = self.build_args(url, target_dir)
        await call_with_retry(
            lambda: self._run(args),
            self._retry_policy,
            retry_on=(RateLimitedError,),
            event="video_download_rate_limited_retry",
            sleep=self._sleep,
        )
        return self.find_video(target_dir)

    @staticmethod
    def find_video(target_dir: Path) -> Path:
        for candidate in sorted(target_dir.iterdir()):
            if candidate.is_file() and candidate.suffix.lower() in VIDEO_SUFFIXES:
                return candidate
        msg = "Download succeeded but no video file found."
        raise DownloadError(msg)

    async def _run(self, args: list[str]) -> None:
        try:
            process = await asyncio.create_subprocess_exec(
                self._binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            msg = f"Could not start {self._binary}: {e}"
            raise DownloadError(msg) from e

        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            process.kill()
            await process.wait()
            raise

        if process.returncode == 0:
            return

        output = (stderr or stdout or b"").decode("utf-8", errors="replace").strip()
        log.warning("yt_dlp_failed", returncode=process.returncode, output=output[-500:])
        if any(marker in output.lower() for marker in _RATE_LIMIT_MARKERS):
            raise RateLimitedError(output or "Rate limited")
        raise DownloadError(output or f"{self._binary} exited with {process.returncode}")
