from .authenticated_identity import AuthenticatedIdentity
from .byte_range import ByteRange
from .mime_type import MimeType
from .object_metadata import ObjectMetadata
from .object_reference import ObjectReference
from .retry_policy import RetryPolicy

__all__ = [
    "AuthenticatedIdentity",
    "ByteRange",
    "MimeType",
    "ObjectMetadata",
    "ObjectReference",
    "RetryPolicy",
]
