from pydantic import BaseModel, ConfigDict, field_validator


class AuthenticatedIdentity(BaseModel):
    """Identity returned by the auth service for a validated bearer token."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str | None = None

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        """Validate that user_id is not blank or empty."""
        if not v or not v.strip():
            msg = "User id cannot be blank or empty"
            raise ValueError(msg)
        return v
