from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.value_objects.retry_policy import RetryPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # make it absolute so reload/CWD doesn't break it
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="DrillMediaProxy", validation_alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_dir: Path = Field(
        default=Path(__file__).resolve().parents[1] / "logs",
        validation_alias="LOG_DIR",
    )

    # API
    api_host: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    api_port: int = Field(default=3000, validation_alias="API_PORT")
    media_mount_prefix: str = Field(default="/media", validation_alias="MEDIA_MOUNT_PREFIX")

    # Supabase
    supabase_url: str | None = Field(default=None, validation_alias="SUPABASE_URL")
    supabase_service_role_key: str | None = Field(
        default=None,
        validation_alias="SUPABASE_SERVICE_ROLE_KEY",
    )
    storage_bucket: str = Field(default="drill-videos", validation_alias="DRILL_STORAGE_BUCKET")

    # Media proxy
    signed_url_ttl_seconds: int = Field(
        default=3600,
        validation_alias="SIGNED_URL_TTL_SECONDS",
        description="Validity window of signed URLs issued for proxied fetches.",
    )
    media_chunk_ceiling_bytes: int = Field(
        default=1_000_000,
        gt=0,
        validation_alias="MEDIA_CHUNK_CEILING_BYTES",
        description="Largest byte span served by one partial response.",
    )
    media_cache_max_age_seconds: int = Field(
        default=3600,
        validation_alias="MEDIA_CACHE_MAX_AGE_SECONDS",
    )
    cors_max_age_seconds: int = Field(default=86400, validation_alias="CORS_MAX_AGE_SECONDS")

    # Upstream HTTP
    upstream_connect_timeout_seconds: float = Field(
        default=10.0,
        validation_alias="UPSTREAM_CONNECT_TIMEOUT_SECONDS",
    )
    upstream_read_timeout_seconds: float = Field(
        default=60.0,
        validation_alias="UPSTREAM_READ_TIMEOUT_SECONDS",
    )
    upstream_chunk_size_bytes: int = Field(
        default=64 * 1024,
        validation_alias="UPSTREAM_CHUNK_SIZE_BYTES",
    )

    # Signed URL retry (1 attempt = no retry)
    signed_url_max_attempts: int = Field(default=1, ge=1, validation_alias="SIGNED_URL_MAX_ATTEMPTS")
    signed_url_initial_interval_seconds: float = Field(
        default=1.0,
        validation_alias="SIGNED_URL_INITIAL_INTERVAL_SECONDS",
    )
    signed_url_backoff_coefficient: float = Field(
        default=2.0,
        validation_alias="SIGNED_URL_BACKOFF_COEFFICIENT",
    )
    signed_url_maximum_interval_seconds: float = Field(
        default=8.0,
        validation_alias="SIGNED_URL_MAXIMUM_INTERVAL_SECONDS",
    )

    # Video acquisition
    yt_dlp_bin: str = Field(default="yt-dlp", validation_alias="YT_DLP_BIN")
    max_download_bytes: int = Field(
        default=50 * 1024 * 1024,
        validation_alias="MAX_DOWNLOAD_BYTES",
    )
    download_allowed_domains: str = Field(
        default=(
            "youtube.com,www.youtube.com,youtu.be,www.youtu.be,"
            "m.youtube.com,music.youtube.com,instagram.com,www.instagram.com"
        ),
        validation_alias="DOWNLOAD_ALLOWED_DOMAINS",
        description="Comma-separated hosts accepted by the download endpoint.",
    )
    download_max_attempts: int = Field(default=4, ge=1, validation_alias="DOWNLOAD_MAX_ATTEMPTS")
    download_initial_interval_seconds: float = Field(
        default=2.0,
        validation_alias="DOWNLOAD_INITIAL_INTERVAL_SECONDS",
    )
    download_backoff_coefficient: float = Field(
        default=2.5,
        validation_alias="DOWNLOAD_BACKOFF_COEFFICIENT",
    )
    download_maximum_interval_seconds: float = Field(
        default=10.0,
        validation_alias="DOWNLOAD_MAXIMUM_INTERVAL_SECONDS",
    )

    @field_validator("supabase_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        return value.rstrip("/") if value else value

    def missing_storage_settings(self) -> tuple[str, ...]:
        """Names of required storage settings that are not set."""
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return tuple(missing)

    @property
    def allowed_download_domains(self) -> tuple[str, ...]:
        return tuple(
            domain.strip() for domain in self.download_allowed_domains.split(",") if domain.strip()
        )

    @property
    def signed_url_retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            maximum_attempts=self.signed_url_max_attempts,
            initial_interval=self.signed_url_initial_interval_seconds,
            backoff_coefficient=self.signed_url_backoff_coefficient,
            maximum_interval=self.signed_url_maximum_interval_seconds,
        )

    @property
    def download_retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            maximum_attempts=self.download_max_attempts,
            initial_interval=self.download_initial_interval_seconds,
            backoff_coefficient=self.download_backoff_coefficient,
            maximum_interval=self.download_maximum_interval_seconds,
        )


# Global settings instance
settings = Settings()
