"""Retry policy configuration.

This module defines the immutable configuration handed to the retry
executor for a single call.
"""

from dataclasses import dataclass, field
from typing import Callable


def retry_on_any_error(err: BaseException) -> bool:
    """Predicate used by the atomic engine: every failure is retryable."""
    return True


@dataclass(frozen=True)
class RetryConfiguration:
    """Configuration for one bounded-retry run.

    Attributes:
        max_attempts: Total attempts including the first one. 1 means the
            predicate is never consulted.
        interval_ms: Delay between attempts, in milliseconds
        retry_predicate: Decides whether an error is worth another attempt

    Example:
        # Back off temporary errors
        config = RetryConfiguration(
            max_attempts=5,
            interval_ms=50,
            retry_predicate=is_temporary_error,
        )
    """

    max_attempts: int = 1
    interval_ms: int = 0
    retry_predicate: Callable[[BaseException], bool] = field(
        default=retry_on_any_error
    )

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.interval_ms < 0:
            raise ValueError("interval_ms must be >= 0")

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000.0
