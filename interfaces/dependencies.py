"""FastAPI dependency injection integration with Lagom."""

from functools import lru_cache

import httpx
from lagom import Container

from infrastructure.di.container import create_container


@lru_cache
def get_container() -> Container:
    """Get the DI container instance.

    Cached to ensure singleton behavior across requests, which also keeps
    one pooled HTTP client for every upstream call.
    """
    return create_container()


async def close_container() -> None:
    """Release the shared HTTP client if a container was ever built."""
    if get_container.cache_info().currsize == 0:
        return
    await get_container()[httpx.AsyncClient].aclose()
    get_container.cache_clear()
