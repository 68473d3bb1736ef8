from pydantic import BaseModel, Field


class DownloadVideoRequest(BaseModel):
    """Request DTO for pulling a third-party video into storage."""

    url: str | None = Field(None, description="Public URL of the video to fetch")


class DownloadVideoResponse(BaseModel):
    """Response DTO describing the stored video."""

    video_file_path: str = Field(..., description="Object path of the stored video")
    size: int = Field(..., description="Stored size in bytes")
