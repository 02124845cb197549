"""Bounded retry executor.

Drives an awaitable operation until it succeeds, fails with an error the
predicate rejects, or runs out of attempts. The executor is shared by the
write façade (temporary-error backoff) and the atomic engine (CAS conflict
retry); only the predicate differs.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from docstore.logging import get_module_logger
from docstore.resilience.retry.config import RetryConfiguration

logger = get_module_logger()

T = TypeVar("T")


async def retry(
    config: RetryConfiguration,
    operation: Callable[[], Awaitable[T]],
    operation_name: Optional[str] = None,
) -> T:
    """Run `operation` under `config`.

    Args:
        config: Attempts, interval and retry predicate
        operation: Zero-argument callable returning a fresh awaitable per attempt
        operation_name: Label used in log events

    Returns:
        The first successful result.

    Raises:
        Exception: The last observed error, unchanged, once the predicate
            rejects it or attempts are exhausted.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await operation()
        except Exception as exc:  # pylint: disable=broad-except
            if attempt >= config.max_attempts:
                if config.max_attempts > 1:
                    logger.warning(
                        "store_retry_exhausted",
                        operation=operation_name,
                        attempts=attempt,
                        error=str(exc),
                    )
                raise

            if not config.retry_predicate(exc):
                raise

            logger.debug(
                "store_retry_scheduled",
                operation=operation_name,
                attempt=attempt,
                max_attempts=config.max_attempts,
                delay_ms=config.interval_ms,
                error=str(exc),
            )
            # Yields to the event loop even when the interval is zero.
            await asyncio.sleep(config.interval_seconds)
