"""Resilience patterns for store calls.

Currently this is the bounded retry executor used for temporary-error
backoff and for the atomic engine's compare-and-swap retry loop.
"""

from docstore.resilience.retry import (
    RetryConfiguration,
    retry,
    retry_on_any_error,
)

__all__ = [
    "RetryConfiguration",
    "retry",
    "retry_on_any_error",
]
