from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from domain.value_objects.byte_range import ByteRange


class UpstreamStream(Protocol):
    """An open upstream response whose body has not been read yet."""

    status_code: int

    def iter_bytes(self) -> AsyncIterator[bytes]: ...
    async def aclose(self) -> None: ...


class MediaFetcher(Protocol):
    """Port for reading object bytes over HTTP through a signed URL."""

    async def probe_size(self, url: str) -> int:
        """Return the object's size from a metadata-only request.

        Raises:
            ObjectNotFoundError: If the probe returns a non-success status
            InfrastructureError: If the request fails on the network

        """
        ...

    async def open_stream(self, url: str, byte_range: ByteRange | None = None) -> UpstreamStream:
        """Start fetching the object, letting the store slice ``byte_range``.

        Raises:
            UpstreamStreamError: If the fetch fails before any body is read

        """
        ...
