"""Bounded retry: configuration and executor."""

from docstore.resilience.retry.config import RetryConfiguration, retry_on_any_error
from docstore.resilience.retry.executor import retry

__all__ = [
    "RetryConfiguration",
    "retry",
    "retry_on_any_error",
]
