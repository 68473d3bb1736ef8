"""Error handling decorator for JSON API routes backed by use cases."""

import functools
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import structlog
from fastapi import HTTPException, status
from returns.result import Failure, Success

from domain.exceptions import ConfigurationError, InfrastructureError
from interfaces.api.routes.helpers import _map_app_error_to_http_exception

if TYPE_CHECKING:
    from typing import Any

logger = structlog.get_logger()


def handle_use_case_errors[T_co](
    func: Callable[..., Awaitable[T_co]],
) -> Callable[..., Awaitable[T_co]]:
    """Unwrap a use case ``Result`` returned by an endpoint.

    - Success results are unwrapped into the response body
    - Failure results become HTTP exceptions via the category mapping
    - Infrastructure and unexpected errors are logged and surface as 500
      with a normalized message
    """

    @functools.wraps(func)
    async def wrapper(*args: "Any", **kwargs: "Any") -> T_co:  # noqa: ANN401
        try:
            result = await func(*args, **kwargs)
        except HTTPException:
            raise
        except ConfigurationError as exc:
            logger.exception("configuration_error", error=str(exc), function=func.__name__)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Missing storage configuration.",
            ) from exc
        except InfrastructureError as exc:
            logger.exception("infrastructure_error", error=str(exc), function=func.__name__)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Service temporarily unavailable",
            ) from exc
        except Exception as exc:
            logger.exception(
                "unexpected_error",
                error=str(exc),
                error_type=type(exc).__name__,
                function=func.__name__,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            ) from exc

        if isinstance(result, Success):
            return result.unwrap()
        if isinstance(result, Failure):
            raise _map_app_error_to_http_exception(result.failure()) from None

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected result type",
        )

    return wrapper
