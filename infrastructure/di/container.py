from __future__ import annotations

import httpx
from lagom import Container

from application.ports.auth_validator import AuthValidator
from application.ports.media_fetcher import MediaFetcher
from application.ports.object_store import ObjectStore
from application.ports.video_downloader import VideoDownloader
from application.use_cases.acquisition_use_cases import AcquireVideoUseCase
from application.use_cases.media_use_cases import (
    AuthenticateRequestUseCase,
    ResolveObjectUseCase,
    ServeMediaUseCase,
)
from infrastructure.config import Settings, settings
from infrastructure.downloaders.yt_dlp_downloader import YtDlpDownloader
from infrastructure.media_fetchers.httpx_media_fetcher import HttpxMediaFetcher
from infrastructure.supabase.auth_validator import SupabaseAuthValidator
from infrastructure.supabase.object_store import SupabaseObjectStore


def create_http_client(config: Settings = settings) -> httpx.AsyncClient:
    """Pooled client shared by the auth, storage and media adapters."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            config.upstream_read_timeout_seconds,
            connect=config.upstream_connect_timeout_seconds,
        ),
        follow_redirects=True,
    )


def create_container(
    config: Settings = settings,
    http_client: httpx.AsyncClient | None = None,
) -> Container:
    container = Container()

    # Shared HTTP client, closed by the API lifespan
    container[httpx.AsyncClient] = http_client or create_http_client(config)

    # An unconfigured store fails every request up front; adapters get empty
    # credentials and are never called.
    missing_configuration = config.missing_storage_settings()
    supabase_url = config.supabase_url or ""
    service_key = config.supabase_service_role_key or ""

    # Collaborators
    container[AuthValidator] = lambda c: SupabaseAuthValidator(
        client=c[httpx.AsyncClient],
        base_url=supabase_url,
        service_key=service_key,
    )
    container[ObjectStore] = lambda c: SupabaseObjectStore(
        client=c[httpx.AsyncClient],
        base_url=supabase_url,
        service_key=service_key,
        bucket=config.storage_bucket,
    )
    container[MediaFetcher] = lambda c: HttpxMediaFetcher(
        c[httpx.AsyncClient],
        chunk_size=config.upstream_chunk_size_bytes,
    )
    container[VideoDownloader] = lambda _: YtDlpDownloader(
        binary=config.yt_dlp_bin,
        retry_policy=config.download_retry_policy,
    )

    # Media Use Cases
    container[AuthenticateRequestUseCase] = lambda c: AuthenticateRequestUseCase(
        auth_validator=c[AuthValidator],
    )
    container[ResolveObjectUseCase] = lambda c: ResolveObjectUseCase(
        object_store=c[ObjectStore],
        media_fetcher=c[MediaFetcher],
        signed_url_ttl_seconds=config.signed_url_ttl_seconds,
        retry_policy=config.signed_url_retry_policy,
    )
    container[ServeMediaUseCase] = lambda c: ServeMediaUseCase(
        authenticate_request=c[AuthenticateRequestUseCase],
        resolve_object=c[ResolveObjectUseCase],
        media_fetcher=c[MediaFetcher],
        chunk_ceiling=config.media_chunk_ceiling_bytes,
        cache_max_age_seconds=config.media_cache_max_age_seconds,
        missing_configuration=missing_configuration,
    )

    # Acquisition Use Cases
    container[AcquireVideoUseCase] = lambda c: AcquireVideoUseCase(
        authenticate_request=c[AuthenticateRequestUseCase],
        object_store=c[ObjectStore],
        video_downloader=c[VideoDownloader],
        allowed_domains=config.allowed_download_domains,
        max_file_bytes=config.max_download_bytes,
        missing_configuration=missing_configuration,
    )

    return container
