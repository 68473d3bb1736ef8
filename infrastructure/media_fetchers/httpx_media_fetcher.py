from __future__ import annotations

from collections.abc import AsyncIterator

import httpx

from application.ports.media_fetcher import MediaFetcher, UpstreamStream
from domain.exceptions import InfrastructureError, ObjectNotFoundError, UpstreamStreamError
from domain.value_objects.byte_range import ByteRange

# Lengths are computed from the stored bytes, so the store must not re-encode them.
_IDENTITY = {"Accept-Encoding": "identity"}


class HttpxUpstreamStream(UpstreamStream):
    def __init__(self, response: httpx.Response, chunk_size: int) -> None:
        self._response = response
        self._chunk_size = chunk_size

    @property
    def status_code(self) -> int:
        return self._response.status_code

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_raw(self._chunk_size):
                yield chunk
        except httpx.HTTPError as e:
            msg = f"Upstream body failed: {type(e).__name__}"
            raise UpstreamStreamError(msg) from e

    async def aclose(self) -> None:
        await self._response.aclose()


class HttpxMediaFetcher(MediaFetcher):
    """Reads object bytes through signed URLs with a shared ``httpx.AsyncClient``.

    Slicing is delegated to the store with an upstream ``Range`` header so a
    partial request never downloads more than the served span.
    """

    def __init__(self, client: httpx.AsyncClient, *, chunk_size: int = 64 * 1024) -> None:
        self._client = client
        self._chunk_size = chunk_size

    async def probe_size(self, url: str) -> int:
        try:
            response = await self._client.head(url, headers=_IDENTITY)
        except httpx.HTTPError as e:
            msg = f"Metadata probe failed: {type(e).__name__}"
            raise InfrastructureError(msg) from e

        if not response.is_success:
            msg = f"Metadata probe returned {response.status_code}"
            raise ObjectNotFoundError(msg)

        content_length = response.headers.get("content-length", "")
        if not content_length.isdigit():
            msg = "Metadata probe returned no usable Content-Length"
            raise InfrastructureError(msg)
        return int(content_length)

    async def open_stream(self, url: str, byte_range: ByteRange | None = None) -> UpstreamStream:
        headers = dict(_IDENTITY)
        expected = {200}
        if byte_range is not None:
            headers["Range"] = byte_range.range_header()
            expected = {200, 206}

        request = self._client.build_request("GET", url, headers=headers)
        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            msg = f"Upstream fetch failed: {type(e).__name__}"
            raise UpstreamStreamError(msg) from e

        if response.status_code not in expected:
            await response.aclose()
            msg = f"Upstream fetch returned {response.status_code}"
            raise UpstreamStreamError(msg)

        return HttpxUpstreamStream(response, self._chunk_size)
