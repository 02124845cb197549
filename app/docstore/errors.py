"""Exceptions raised by the document store driver.

Store clients report failures as `StoreError` carrying a numeric code and a
message. The driver itself only adds `InvalidOperationError`, raised for
programmer errors before any store call is issued.
"""

from enum import IntEnum
from typing import Any, Optional


class ErrorCode(IntEnum):
    """Canonical store status codes.

    The numeric values match the legacy binary protocol codes, so an error
    whose code stringifies to "11" or "13" classifies the same way as one
    carrying the enum member.
    """

    TEMPORARY_FAILURE = 11
    KEY_ALREADY_EXISTS = 12
    KEY_NOT_FOUND = 13


class DriverError(Exception):
    """Base exception for all driver errors.

    Example:
        try:
            await driver.atomic("doc::1", transform)
        except DriverError as e:
            logger.error("atomic_failed", error=str(e))
    """

    pass


class InvalidOperationError(DriverError):
    """Raised when an unsupported operation name reaches the write façade.

    Example:
        >>> await facade.execute("append", "doc::1")
        Traceback (most recent call last):
        ...
        InvalidOperationError: Invalid write operation: append
    """

    pass


class StoreError(DriverError):
    """Failure reported by the underlying store client.

    Attributes:
        code: Store status code (usually an `ErrorCode`, but any value the
            store reports is preserved untouched)
        message: Human-readable description from the store
        key: Document key the failed call targeted, when known
    """

    def __init__(
        self,
        message: str,
        code: Any = None,
        key: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.key = key

    @property
    def is_not_found(self) -> bool:
        from docstore.operations.classifiers import is_key_not_found

        return is_key_not_found(self)

    @property
    def is_temporary(self) -> bool:
        from docstore.operations.classifiers import is_temporary_error

        return is_temporary_error(self)

    def __repr__(self) -> str:
        return f"StoreError(code={self.code!r}, message={self.message!r}, key={self.key!r})"
