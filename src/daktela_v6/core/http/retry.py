"""Retry policy for the request executor.

Computes exponential backoff delays and decides which HTTP statuses and
failure kinds are worth another attempt. The policy is pure configuration;
the executor owns the attempt loop and the blocking sleep.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_RETRYABLE_STATUS_CODES = frozenset({408, 500, 502, 503, 504})


class RetryPolicy(BaseModel):
    """Exponential backoff configuration.

    Example:
        >>> policy = RetryPolicy(base_delay_ms=100, multiplier=2.0)
        >>> [policy.delay_for_attempt(n) for n in range(5)]
        [100, 200, 400, 800, 1600]
    """

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    base_delay_ms: int = Field(default=100, gt=0, description="Delay before the first retry")
    max_delay_ms: int = Field(default=10_000, gt=0, description="Upper bound for any delay")
    multiplier: float = Field(default=2.0, ge=1.0, description="Growth factor per retry")
    retryable_status_codes: frozenset[int] = Field(
        default=DEFAULT_RETRYABLE_STATUS_CODES,
        description="HTTP statuses that trigger a retry",
    )
    retry_on_connection_error: bool = Field(
        default=True, description="Retry when the host cannot be reached"
    )

    @model_validator(mode="after")
    def validate_delay_ordering(self) -> "RetryPolicy":
        """Assert max_delay_ms >= base_delay_ms."""
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError(
                f"max_delay_ms ({self.max_delay_ms}) must be greater than or "
                f"equal to base_delay_ms ({self.base_delay_ms})"
            )
        return self

    def delay_for_attempt(self, attempt: int) -> int:
        """Return the delay in milliseconds before a retry.

        Args:
            attempt: Zero-based retry index (0 is the first retry).

        Returns:
            ``base_delay_ms * multiplier ** attempt`` clamped to ``max_delay_ms``.
        """
        delay = int(self.base_delay_ms * (self.multiplier**attempt))
        return min(delay, self.max_delay_ms)

    def delay_seconds_for_attempt(self, attempt: int) -> float:
        return self.delay_for_attempt(attempt) / 1000.0

    def is_retryable_status(self, status_code: int) -> bool:
        return status_code in self.retryable_status_codes

    @classmethod
    def disabled(cls) -> "RetryPolicy":
        """Policy that never retries."""
        return cls(max_retries=0)

    @classmethod
    def aggressive(cls) -> "RetryPolicy":
        """Five quick retries growing 2.5x per attempt, capped at 30 seconds."""
        return cls(
            max_retries=5,
            base_delay_ms=50,
            max_delay_ms=30_000,
            multiplier=2.5,
        )
