from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pathlib import Path


class VideoDownloader(Protocol):
    """Port for the external tool that pulls a third-party video to disk."""

    async def download(self, url: str, target_dir: Path) -> Path:
        """Download ``url`` into ``target_dir`` and return the video file.

        Raises:
            RateLimitedError: If the source kept rate limiting
            DownloadError: If the download failed or produced no video file

        """
        ...
