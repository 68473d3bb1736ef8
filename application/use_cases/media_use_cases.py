from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable

import anyio
import structlog
from returns.result import Failure, Result, Success

from application.dtos.errors import AppError
from application.dtos.media_dtos import MediaRequest, MediaResponse, ResolvedObject
from application.policies.retry_policy import call_with_retry
from application.ports.auth_validator import AuthValidator
from application.ports.media_fetcher import MediaFetcher, UpstreamStream
from application.ports.object_store import ObjectStore
from domain.exceptions import (
    InfrastructureError,
    InvalidPathError,
    ObjectNotFoundError,
    RangeNotSatisfiableError,
)
from domain.services.range_selection import (
    DEFAULT_CHUNK_CEILING,
    RangeSelection,
    SelectionKind,
    select_range,
)
from domain.value_objects.authenticated_identity import AuthenticatedIdentity
from domain.value_objects.object_metadata import ObjectMetadata
from domain.value_objects.object_reference import ObjectReference
from domain.value_objects.retry_policy import NO_RETRY, RetryPolicy

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None, token: str | None = None) -> str | None:
    """Pick the credential from the Authorization header, else the query parameter.

    Native media elements cannot attach headers to the range requests they
    issue, which is why a ``token`` query parameter is accepted at all.
    """
    if authorization and authorization.startswith(BEARER_PREFIX):
        header_token = authorization[len(BEARER_PREFIX) :].strip()
        if header_token:
            return header_token
    if token:
        return token
    return None


class AuthenticateRequestUseCase:
    """Validate the bearer credential carried by a request.

    Every request is validated independently; nothing is cached.
    """

    def __init__(self, auth_validator: AuthValidator) -> None:
        self.auth_validator = auth_validator

    async def execute(
        self,
        authorization: str | None,
        token: str | None = None,
    ) -> Result[AuthenticatedIdentity, AppError]:
        credential = extract_bearer_token(authorization, token)
        if credential is None:
            return Failure(AppError("unauthenticated", "Missing authorization token."))

        try:
            identity = await self.auth_validator.validate_token(credential)
        except InfrastructureError as e:
            logger.warning("token_validation_failed", error=str(e))
            return Failure(AppError("unauthenticated", "Unable to authenticate user."))

        if identity is None:
            return Failure(AppError("unauthenticated", "Unable to authenticate user."))

        return Success(identity)


class ResolveObjectUseCase:
    """Produce a signed fetch URL and authoritative metadata for an object.

    Signed URL issuance runs under ``retry_policy``; the size probe is not
    retried. Content type comes from the extension table only.
    """

    def __init__(
        self,
        object_store: ObjectStore,
        media_fetcher: MediaFetcher,
        signed_url_ttl_seconds: int = 3600,
        retry_policy: RetryPolicy = NO_RETRY,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self.object_store = object_store
        self.media_fetcher = media_fetcher
        self.signed_url_ttl_seconds = signed_url_ttl_seconds
        self.retry_policy = retry_policy
        self.sleep = sleep

    async def execute(self, reference: ObjectReference) -> Result[ResolvedObject, AppError]:
        try:
            signed_url = await call_with_retry(
                lambda: self.object_store.issue_signed_url(
                    reference.path,
                    self.signed_url_ttl_seconds,
                ),
                self.retry_policy,
                retry_on=(InfrastructureError,),
                event="signed_url_retry",
                sleep=self.sleep,
                object_path=reference.path,
            )
            size_bytes = await self.media_fetcher.probe_size(signed_url)
        except (ObjectNotFoundError, InfrastructureError) as e:
            logger.warning(
                "object_resolution_failed",
                object_path=reference.path,
                error=str(e),
                error_type=type(e).__name__,
            )
            return Failure(AppError("not_found", "File not found."))

        return Success(
            ResolvedObject(
                reference=reference,
                signed_url=signed_url,
                metadata=ObjectMetadata(
                    size_bytes=size_bytes,
                    content_type=reference.content_type,
                ),
            ),
        )


async def relay_stream(upstream: UpstreamStream, **log_context: object) -> AsyncIterator[bytes]:
    """Pipe an upstream body through without buffering it.

    The response is already committed when this runs, so a failure can only
    be logged before the connection is dropped. Closing the upstream is
    shielded so a client disconnect still releases it.
    """
    bytes_sent = 0
    try:
        async for chunk in upstream.iter_bytes():
            bytes_sent += len(chunk)
            yield chunk
    except InfrastructureError:
        logger.exception("upstream_stream_failed", bytes_sent=bytes_sent, **log_context)
        raise
    finally:
        with anyio.CancelScope(shield=True):
            await upstream.aclose()


class ServeMediaUseCase:
    """Authenticate, validate, resolve and stream one media request.

    HEAD requests (``include_body=False``) stop after metadata resolution and
    never open the object's byte stream.
    """

    def __init__(
        self,
        authenticate_request: AuthenticateRequestUseCase,
        resolve_object: ResolveObjectUseCase,
        media_fetcher: MediaFetcher,
        chunk_ceiling: int = DEFAULT_CHUNK_CEILING,
        cache_max_age_seconds: int = 3600,
        missing_configuration: tuple[str, ...] = (),
    ) -> None:
        self.authenticate_request = authenticate_request
        self.resolve_object = resolve_object
        self.media_fetcher = media_fetcher
        self.chunk_ceiling = chunk_ceiling
        self.cache_max_age_seconds = cache_max_age_seconds
        self.missing_configuration = missing_configuration

    async def execute(self, request: MediaRequest) -> Result[MediaResponse, AppError]:
        if self.missing_configuration:
            logger.error("storage_configuration_missing", missing=list(self.missing_configuration))
            return Failure(AppError("configuration", "Missing storage configuration."))

        try:
            return await self._serve(request)
        except Exception as e:
            logger.error(
                "unexpected_error_in_serve_media_use_case",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return Failure(AppError("internal_error", f"Unexpected error: {e!s}"))

    async def _serve(self, request: MediaRequest) -> Result[MediaResponse, AppError]:
        auth_result = await self.authenticate_request.execute(
            authorization=request.authorization,
            token=request.token,
        )
        if isinstance(auth_result, Failure):
            return auth_result
        identity = auth_result.unwrap()

        try:
            reference = ObjectReference.parse(request.raw_path)
        except InvalidPathError as e:
            logger.warning("invalid_object_path", user_id=identity.user_id, error=str(e))
            return Failure(AppError("validation", str(e)))

        resolved_result = await self.resolve_object.execute(reference)
        if isinstance(resolved_result, Failure):
            return resolved_result
        resolved = resolved_result.unwrap()
        metadata = resolved.metadata

        if not request.include_body:
            logger.info(
                "media_head_served",
                object_path=reference.path,
                user_id=identity.user_id,
                size_bytes=metadata.size_bytes,
            )
            return Success(
                MediaResponse(
                    status_code=200,
                    headers=self._entity_headers(metadata, metadata.size_bytes),
                ),
            )

        try:
            selection = select_range(
                request.range_header,
                metadata.size_bytes,
                chunk_ceiling=self.chunk_ceiling,
            )
        except RangeNotSatisfiableError as e:
            logger.info(
                "range_not_satisfiable",
                object_path=reference.path,
                user_id=identity.user_id,
                range=request.range_header,
                size_bytes=e.size_bytes,
            )
            return Failure(
                AppError(
                    "range_not_satisfiable",
                    "Requested range not satisfiable",
                    size_bytes=e.size_bytes,
                ),
            )

        return await self._stream(resolved, selection, identity)

    async def _stream(
        self,
        resolved: ResolvedObject,
        selection: RangeSelection,
        identity: AuthenticatedIdentity,
    ) -> Result[MediaResponse, AppError]:
        object_path = resolved.reference.path
        try:
            upstream = await self.media_fetcher.open_stream(resolved.signed_url, selection.byte_range)
        except InfrastructureError as e:
            logger.error(
                "upstream_open_failed",
                object_path=object_path,
                user_id=identity.user_id,
                error=str(e),
            )
            return Failure(AppError("upstream_error", "Failed to fetch file."))

        # A store that ignores Range answers 200 with the whole object.
        byte_range = selection.byte_range
        if (
            byte_range is not None
            and upstream.status_code != 206
            and not byte_range.covers(selection.size_bytes)
        ):
            await upstream.aclose()
            logger.error(
                "upstream_ignored_range",
                object_path=object_path,
                user_id=identity.user_id,
                upstream_status=upstream.status_code,
            )
            return Failure(AppError("upstream_error", "Failed to fetch file."))

        headers = self._entity_headers(resolved.metadata, selection.content_length)
        if selection.kind is SelectionKind.PARTIAL and byte_range is not None:
            headers["Content-Range"] = byte_range.content_range(selection.size_bytes)

        logger.info(
            "media_request_served",
            object_path=object_path,
            user_id=identity.user_id,
            status=selection.status_code,
            content_range=headers.get("Content-Range"),
            content_length=selection.content_length,
        )
        return Success(
            MediaResponse(
                status_code=selection.status_code,
                headers=headers,
                body=relay_stream(upstream, object_path=object_path, user_id=identity.user_id),
            ),
        )

    def _entity_headers(self, metadata: ObjectMetadata, content_length: int) -> dict[str, str]:
        return {
            "Content-Type": metadata.content_type.value,
            "Content-Length": str(content_length),
            "Accept-Ranges": "bytes",
            "Cache-Control": f"public, max-age={self.cache_max_age_seconds}",
        }
