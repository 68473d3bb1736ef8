"""Uniform retry execution for collaborator calls at use case boundaries."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

import structlog

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from domain.value_objects.retry_policy import RetryPolicy

logger = structlog.get_logger()

T = TypeVar("T")


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    retry_on: tuple[type[BaseException], ...],
    event: str,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    **log_context: object,
) -> T:
    """Await ``operation`` until it succeeds or the policy is exhausted.

    Only exceptions in ``retry_on`` are retried. The last one is re-raised
    once ``policy.maximum_attempts`` calls have failed.
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except retry_on as exc:
            if attempt >= policy.maximum_attempts:
                raise
            delay = policy.delay_for(attempt)
            logger.warning(
                event,
                attempt=attempt,
                maximum_attempts=policy.maximum_attempts,
                delay_seconds=delay,
                error=str(exc),
                **log_context,
            )
            await sleep(delay)
            attempt += 1
