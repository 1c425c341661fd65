"""Retry policy for service readiness polling."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RetryPolicy(BaseModel):
    """Attempt budget and inter-attempt delay.

    Attributes:
        max_attempts: Re-check cycles allowed after the first start command.
        delay_seconds: Wait before the first re-check.
        backoff: Multiplier applied per attempt (1.0 = fixed delay).
        max_delay_seconds: Upper bound for any single wait.
    """

    model_config = {"frozen": True}

    max_attempts: int = Field(default=3, ge=0)
    delay_seconds: float = Field(default=2.0, ge=0)
    backoff: float = Field(default=1.0, ge=1.0)
    max_delay_seconds: float = Field(default=30.0, ge=0)

    @classmethod
    def immediate(cls, max_attempts: int = 3) -> RetryPolicy:
        """Zero-delay policy (tests, scripted environments)."""
        return cls(max_attempts=max_attempts, delay_seconds=0.0)

    def delay_for(self, attempt: int) -> float:
        """Delay before re-check *attempt* (1-based).

        Examples:
            >>> RetryPolicy(delay_seconds=1.0, backoff=2.0).delay_for(3)
            4.0
            >>> RetryPolicy(delay_seconds=10.0, backoff=3.0, max_delay_seconds=20.0).delay_for(2)
            20.0
        """
        if attempt < 1:
            return 0.0
        delay = self.delay_seconds * self.backoff ** (attempt - 1)
        return min(delay, self.max_delay_seconds)
