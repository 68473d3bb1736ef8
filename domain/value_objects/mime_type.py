from enum import Enum


class MimeType(str, Enum):
    """Represent MIME types the media proxy serves, keyed by file extension."""

    MP4 = "video/mp4"
    WEBM = "video/webm"
    MKV = "video/x-matroska"
    MOV = "video/quicktime"
    AVI = "video/x-msvideo"
    M4V = "video/x-m4v"

    JPEG = "image/jpeg"
    PNG = "image/png"
    GIF = "image/gif"
    WEBP = "image/webp"
    SVG = "image/svg+xml"

    OCTET_STREAM = "application/octet-stream"

    @classmethod
    def from_extension(cls, extension: str | None) -> "MimeType":
        """Look up the MIME type for a file extension, case-insensitively."""
        if not extension:
            return cls.OCTET_STREAM
        return _EXTENSIONS.get(extension.lower().lstrip("."), cls.OCTET_STREAM)


_EXTENSIONS: dict[str, MimeType] = {
    "mp4": MimeType.MP4,
    "webm": MimeType.WEBM,
    "mkv": MimeType.MKV,
    "mov": MimeType.MOV,
    "avi": MimeType.AVI,
    "m4v": MimeType.M4V,
    "jpg": MimeType.JPEG,
    "jpeg": MimeType.JPEG,
    "png": MimeType.PNG,
    "gif": MimeType.GIF,
    "webp": MimeType.WEBP,
    "svg": MimeType.SVG,
}
