"""Domain exceptions for business rule violations."""


class DomainError(Exception):
    """Base exception for domain layer."""


class ValidationError(DomainError):
    """Raised when input validation fails."""


class InvalidPathError(ValidationError):
    """Raised when an object path is malformed or attempts traversal."""


class ObjectNotFoundError(DomainError):
    """Raised when the object store cannot resolve an object."""


class RangeNotSatisfiableError(DomainError):
    """Raised when a Range header cannot be satisfied for an object."""

    def __init__(self, size_bytes: int, range_header: str | None = None) -> None:
        super().__init__(f"Range {range_header!r} not satisfiable for {size_bytes} bytes")
        self.size_bytes = size_bytes
        self.range_header = range_header


class InfrastructureError(DomainError):
    """Raised when infrastructure operations fail (DB, network, etc.)."""


class UpstreamStreamError(InfrastructureError):
    """Raised when the proxied fetch of an object's bytes fails."""


class ConfigurationError(InfrastructureError):
    """Raised when required service configuration is absent."""


class DownloadError(DomainError):
    """Raised when an external video download fails."""


class RateLimitedError(DownloadError):
    """Raised when the video source keeps rate limiting after all retries."""
