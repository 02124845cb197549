"""Retry-wrapped write façade over the store client.

Wraps `insert`, `upsert`, `remove` and `get_and_lock` with:
- fail-fast validation of the operation name
- a no-op short-circuit for an empty key
- temporary-error backoff through the retry executor
- not-found suppression for `remove` and `get_and_lock`
"""

from typing import Any, Dict, Optional

from docstore.configuration.options import DriverOptions
from docstore.errors import InvalidOperationError
from docstore.logging import get_module_logger
from docstore.operations.classifiers import is_key_not_found
from docstore.resilience.retry import retry

logger = get_module_logger()

SUPPORTED_OPERATIONS = ("insert", "upsert", "remove", "get_and_lock")
VALUE_OPERATIONS = ("insert", "upsert")
NOT_FOUND_SUPPRESSED = ("remove", "get_and_lock")

_NO_VALUE = object()


class WriteFacade:
    """Thin retry-wrapped versions of the store's mutating operations.

    Args:
        store: DocumentStore implementation, shared read-only
    """

    def __init__(self, store: Any) -> None:
        self._store = store

    async def execute(
        self,
        operation: str,
        key: Optional[str],
        value: Any = _NO_VALUE,
        options: Optional[DriverOptions] = None,
        store_options: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Run one store operation under the temporary-error retry policy.

        Args:
            operation: One of SUPPORTED_OPERATIONS
            key: Document key. Empty or None completes as a no-op.
            value: Document body for insert/upsert
            options: Resolved driver options (defaults if None)
            store_options: Options forwarded to the store call (cas, expiry...)

        Returns:
            The store's result, or None for an empty key or a suppressed
            not-found.

        Raises:
            InvalidOperationError: Unsupported operation name
            StoreError: Last error once retries are exhausted or the error is
                not temporary
        """
        store_fn = getattr(self._store, operation, None)
        if operation not in SUPPORTED_OPERATIONS or not callable(store_fn):
            raise InvalidOperationError(f"Invalid write operation: {operation}")

        if not key:
            return None

        options = options or DriverOptions()
        store_options = dict(store_options or {})
        retry_config = options.temporary_retry()

        if operation in VALUE_OPERATIONS:
            if value is _NO_VALUE:
                raise InvalidOperationError(f"{operation} requires a value")
            args = (key, value)
        else:
            args = (key,)

        logger.debug(
            "store_operation",
            operation=operation,
            key=key,
            max_attempts=retry_config.max_attempts,
            interval_ms=retry_config.interval_ms,
        )

        async def attempt() -> Any:
            try:
                return await store_fn(*args, **store_options)
            except Exception as exc:  # pylint: disable=broad-except
                if operation in NOT_FOUND_SUPPRESSED and is_key_not_found(exc):
                    return None
                raise

        return await retry(retry_config, attempt, operation_name=operation)

    async def insert(self, key, value, options=None, store_options=None) -> Any:
        return await self.execute("insert", key, value, options, store_options)

    async def upsert(self, key, value, options=None, store_options=None) -> Any:
        return await self.execute("upsert", key, value, options, store_options)

    async def remove(self, key, options=None, store_options=None) -> Any:
        return await self.execute(
            "remove", key, options=options, store_options=store_options
        )

    async def get_and_lock(self, key, options=None, store_options=None) -> Any:
        return await self.execute(
            "get_and_lock", key, options=options, store_options=store_options
        )
