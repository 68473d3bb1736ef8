"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from infrastructure.config import Settings


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "SUPABASE_URL",
        "SUPABASE_SERVICE_ROLE_KEY",
        "DRILL_STORAGE_BUCKET",
        "DOWNLOAD_ALLOWED_DOMAINS",
        "SIGNED_URL_MAX_ATTEMPTS",
        "MEDIA_CHUNK_CEILING_BYTES",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Test Settings."""

    def test_defaults(self, clean_env) -> None:
        config = Settings(_env_file=None)

        assert config.api_port == 3000
        assert config.media_mount_prefix == "/media"
        assert config.storage_bucket == "drill-videos"
        assert config.media_chunk_ceiling_bytes == 1_000_000
        assert config.signed_url_retry_policy.maximum_attempts == 1
        assert config.download_retry_policy.delays() == [2.0, 5.0, 10.0]

    def test_missing_storage_settings(self, clean_env) -> None:
        config = Settings(_env_file=None)

        assert config.missing_storage_settings() == (
            "SUPABASE_URL",
            "SUPABASE_SERVICE_ROLE_KEY",
        )

    def test_configured_from_environment(self, clean_env) -> None:
        clean_env.setenv("SUPABASE_URL", "https://project.supabase.test/")
        clean_env.setenv("SUPABASE_SERVICE_ROLE_KEY", "key")
        clean_env.setenv("DRILL_STORAGE_BUCKET", "clips")
        clean_env.setenv("SIGNED_URL_MAX_ATTEMPTS", "3")

        config = Settings(_env_file=None)

        assert config.supabase_url == "https://project.supabase.test"
        assert config.storage_bucket == "clips"
        assert config.missing_storage_settings() == ()
        assert config.signed_url_retry_policy.maximum_attempts == 3

    def test_allowed_download_domains(self, clean_env) -> None:
        clean_env.setenv("DOWNLOAD_ALLOWED_DOMAINS", " youtube.com, ,youtu.be ")

        config = Settings(_env_file=None)

        assert config.allowed_download_domains == ("youtube.com", "youtu.be")

    def test_default_allowed_domains(self, clean_env) -> None:
        config = Settings(_env_file=None)

        assert "www.youtube.com" in config.allowed_download_domains
        assert "www.instagram.com" in config.allowed_download_domains

    def test_chunk_ceiling_must_be_positive(self, clean_env) -> None:
        clean_env.setenv("MEDIA_CHUNK_CEILING_BYTES", "0")

        with pytest.raises(ValueError):
            Settings(_env_file=None)
