from __future__ import annotations

import time
from collections.abc import Callable
from urllib.parse import quote

import httpx
import structlog

from application.ports.object_store import ObjectStore
from domain.exceptions import ConfigurationError, InfrastructureError, ObjectNotFoundError

log = structlog.get_logger(__name__)

# Supabase storage answers 400 with an "Object not found" body for missing keys.
_NOT_FOUND_STATUSES = frozenset({400, 404})


class SupabaseObjectStore(ObjectStore):
    """ObjectStore adapter over the Supabase storage REST API.

    Uses the service role key, which never leaves this process; clients only
    ever see the short-lived signed URLs it issues.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        service_key: str,
        bucket: str,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._storage_url = f"{base_url.rstrip('/')}/storage/v1"
        self._service_key = service_key
        self._bucket = bucket
        self._clock = clock

    @property
    def _headers(self) -> dict[str, str]:
        if not self._service_key:
            msg = "Supabase service role key is not configured"
            raise ConfigurationError(msg)
        return {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
        }

    def _object_url(self, kind: str, object_path: str) -> str:
        prefix = f"{self._storage_url}/object"
        if kind:
            prefix = f"{prefix}/{kind}"
        return f"{prefix}/{self._bucket}/{quote(object_path)}"

    async def issue_signed_url(self, object_path: str, ttl_seconds: int) -> str:
        try:
            response = await self._client.post(
                self._object_url("sign", object_path),
                json={"expiresIn": ttl_seconds},
                headers=self._headers,
            )
        except httpx.HTTPError as e:
            msg = f"Signed URL request failed: {type(e).__name__}"
            raise InfrastructureError(msg) from e

        if response.status_code in _NOT_FOUND_STATUSES:
            msg = f"Object not found: {object_path}"
            raise ObjectNotFoundError(msg)
        if not response.is_success:
            msg = f"Storage returned {response.status_code} while signing {object_path}"
            raise InfrastructureError(msg)

        try:
            payload = response.json()
        except ValueError as e:
            msg = f"Storage returned a non-JSON body while signing {object_path}"
            raise InfrastructureError(msg) from e
        if not isinstance(payload, dict):
            msg = f"Storage returned an unexpected payload while signing {object_path}"
            raise InfrastructureError(msg)

        signed = payload.get("signedURL") or payload.get("signedUrl")
        if not signed or not isinstance(signed, str):
            msg = f"No signed URL returned for {object_path}"
            raise InfrastructureError(msg)

        signed = signed.strip()
        if signed.startswith(("http://", "https://")):
            return signed
        return f"{self._storage_url}{signed}"

    async def store_object(
        self,
        owner_id: str,
        data: bytes,
        content_type: str,
        *,
        extension: str = ".mp4",
    ) -> str:
        if not extension.startswith("."):
            extension = f".{extension}"
        object_path = f"{owner_id}/{int(self._clock() * 1000)}{extension}"

        try:
            response = await self._client.post(
                self._object_url("", object_path),
                content=data,
                headers={
                    **self._headers,
                    "Content-Type": content_type,
                    "x-upsert": "false",
                },
            )
        except httpx.HTTPError as e:
            msg = f"Upload request failed: {type(e).__name__}"
            raise InfrastructureError(msg) from e

        if not response.is_success:
            msg = f"Storage returned {response.status_code} while uploading {object_path}"
            raise InfrastructureError(msg)

        log.info("object_stored", object_path=object_path, size_bytes=len(data))
        return object_path
