from __future__ import annotations

from typing import Protocol


class ObjectStore(Protocol):
    """Port for the owner-scoped blob storage of the managed backend."""

    async def issue_signed_url(self, object_path: str, ttl_seconds: int) -> str:
        """Issue a time-limited URL granting read access to one object.

        Raises:
            ObjectNotFoundError: If the store has no such object
            InfrastructureError: If the store cannot be reached

        """
        ...

    async def store_object(
        self,
        owner_id: str,
        data: bytes,
        content_type: str,
        *,
        extension: str = ".mp4",
    ) -> str:
        """Upload bytes under the owner's prefix and return the object path."""
        ...
