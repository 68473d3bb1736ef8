from pydantic import BaseModel, ConfigDict, Field


class RetryPolicy(BaseModel):
    """Exponential backoff settings for a retried collaborator call.

    ``maximum_attempts`` counts the first call, so ``1`` means no retry.
    """

    model_config = ConfigDict(frozen=True)

    maximum_attempts: int = Field(default=1, ge=1)
    initial_interval: float = Field(default=1.0, ge=0.0, description="Seconds before the first retry")
    backoff_coefficient: float = Field(default=2.0, ge=1.0)
    maximum_interval: float | None = Field(
        default=None,
        ge=0.0,
        description="Upper bound on any single delay, in seconds",
    )

    def delay_for(self, retry_number: int) -> float:
        """Seconds to wait before retry ``retry_number`` (1-based)."""
        delay = self.initial_interval * self.backoff_coefficient ** (retry_number - 1)
        if self.maximum_interval is not None:
            delay = min(delay, self.maximum_interval)
        return delay

    def delays(self) -> list[float]:
        return [self.delay_for(n) for n in range(1, self.maximum_attempts)]


NO_RETRY = RetryPolicy()
