from typing import Any


class AppError:
    """Represents different categories of application errors."""

    def __init__(self, category: str, message: str, **context: Any) -> None:  # noqa: ANN401
        # 'unauthenticated', 'validation', 'not_found', 'range_not_satisfiable',
        # 'rate_limited', 'configuration', 'upstream_error', 'internal_error'
        self.category = category
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"AppError({self.category!r}, {self.message!r})"
