from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects.object_metadata import ObjectMetadata
from domain.value_objects.object_reference import ObjectReference


class MediaRequest(BaseModel):
    """Request DTO for serving a stored object."""

    raw_path: str = Field(..., description="URL path after the media mount prefix")
    authorization: str | None = Field(None, description="Raw Authorization header")
    token: str | None = Field(None, description="Token query parameter for native media elements")
    range_header: str | None = Field(None, description="Raw Range header")
    include_body: bool = Field(True, description="False for HEAD probes")


class ResolvedObject(BaseModel):
    """A stored object ready to be fetched without storage credentials."""

    model_config = ConfigDict(frozen=True)

    reference: ObjectReference
    signed_url: str = Field(..., repr=False)
    metadata: ObjectMetadata


@dataclass
class MediaResponse:
    """Status, headers and (for GET) the upstream body to relay."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: AsyncIterator[bytes] | None = None
