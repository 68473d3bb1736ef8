"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from domain.value_objects.authenticated_identity import AuthenticatedIdentity
from tests.mocks import OWNER_ID, VALID_TOKEN


@pytest.fixture
def sample_identity() -> AuthenticatedIdentity:
    """Return the identity the valid token belongs to."""
    return AuthenticatedIdentity(user_id=OWNER_ID, email="coach@example.com")


@pytest.fixture
def tokens(sample_identity: AuthenticatedIdentity) -> dict[str, AuthenticatedIdentity]:
    return {VALID_TOKEN: sample_identity}


@pytest.fixture
def video_path() -> str:
    return f"{OWNER_ID}/1714060800000.mp4"


@pytest.fixture
def small_video() -> bytes:
    """A 100-byte object whose bytes equal their offsets."""
    return bytes(range(100))


@pytest.fixture
def large_video() -> bytes:
    """A 1,000,000-byte object with a non-repeating prefix."""
    return bytes(i % 251 for i in range(1_000_000))
