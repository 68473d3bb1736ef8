"""Domain layer exports."""

from domain.exceptions import (
    DomainError,
    InvalidPathError,
    ObjectNotFoundError,
    RangeNotSatisfiableError,
    ValidationError,
)
from domain.value_objects import (
    AuthenticatedIdentity,
    ByteRange,
    MimeType,
    ObjectMetadata,
    ObjectReference,
    RetryPolicy,
)

__all__ = [
    "AuthenticatedIdentity",
    "ByteRange",
    "DomainError",
    "InvalidPathError",
    "MimeType",
    "ObjectMetadata",
    "ObjectNotFoundError",
    "ObjectReference",
    "RangeNotSatisfiableError",
    "RetryPolicy",
    "ValidationError",
]
