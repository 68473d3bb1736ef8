from __future__ import annotations

import httpx
import structlog

from application.ports.auth_validator import AuthValidator
from domain.exceptions import ConfigurationError, InfrastructureError
from domain.value_objects.authenticated_identity import AuthenticatedIdentity

log = structlog.get_logger(__name__)

_REJECTED_STATUSES = frozenset({400, 401, 403, 404})


class SupabaseAuthValidator(AuthValidator):
    """AuthValidator adapter backed by the Supabase GoTrue ``/user`` endpoint."""

    def __init__(self, client: httpx.AsyncClient, base_url: str, service_key: str) -> None:
        self._client = client
        self._user_url = f"{base_url.rstrip('/')}/auth/v1/user"
        self._service_key = service_key

    async def validate_token(self, token: str) -> AuthenticatedIdentity | None:
        if not self._service_key:
            msg = "Supabase service role key is not configured"
            raise ConfigurationError(msg)

        try:
            response = await self._client.get(
                self._user_url,
                headers={
                    "Authorization": f"Bearer {token}",
                    "apikey": self._service_key,
                },
            )
        except httpx.HTTPError as e:
            msg = f"Auth service request failed: {type(e).__name__}"
            raise InfrastructureError(msg) from e

        if response.status_code in _REJECTED_STATUSES:
            log.info("token_rejected", status=response.status_code)
            return None
        if not response.is_success:
            msg = f"Auth service returned {response.status_code}"
            raise InfrastructureError(msg)

        try:
            payload = response.json()
        except ValueError as e:
            msg = "Auth service returned a non-JSON body"
            raise InfrastructureError(msg) from e
        if not isinstance(payload, dict):
            msg = "Auth service returned an unexpected payload"
            raise InfrastructureError(msg)

        user_id = payload.get("id")
        if not user_id:
            return None
        return AuthenticatedIdentity(user_id=str(user_id), email=payload.get("email"))
