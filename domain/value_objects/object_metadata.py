from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects.mime_type import MimeType


class ObjectMetadata(BaseModel):
    """Size and content type of a stored object, resolved per request."""

    model_config = ConfigDict(frozen=True)

    size_bytes: int = Field(ge=0, description="Authoritative size from a live store probe")
    content_type: MimeType = Field(description="Derived from the object's extension only")
