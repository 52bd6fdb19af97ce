"""Retry configuration model."""

from pydantic import BaseModel, ConfigDict, Field


class RetryConfig(BaseModel):
    """Configuration for retry logic.

    A base_delay larger than max_delay is accepted: the computed backoff is
    simply clamped to max_delay.

    Attributes:
        attempt_budget: Maximum number of invocation attempts (1 = no retries)
        base_delay: Base backoff unit in seconds
        max_delay: Upper bound on the computed backoff in seconds
    """

    attempt_budget: int = Field(3, gt=0)
    base_delay: float = Field(1.0, ge=0.0)  # Allow 0 for tests
    max_delay: float = Field(8.0, ge=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")
