from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from domain.value_objects.authenticated_identity import AuthenticatedIdentity


class AuthValidator(Protocol):
    """Port for the managed auth service."""

    async def validate_token(self, token: str) -> AuthenticatedIdentity | None:
        """Validate a bearer token.

        Returns:
            The identity the token belongs to, or None if the service rejects it

        Raises:
            InfrastructureError: If the auth service cannot be reached

        """
        ...
