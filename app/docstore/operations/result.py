"""Result of a low-level backend call.

DynamoDB requests and cluster REST probes report their outcome as an
`OperationResult` instead of raising; the store and driver layers then turn
it into `StoreError`/`DriverError` with driver semantics.
"""

from dataclasses import dataclass
from typing import Any, Optional

from docstore.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Outcome of one backend call.

    Attributes:
        status: High-level outcome
        message: Human-readable detail for logs and raised errors
        data: Response payload; for CONFLICT, the item that failed the
            condition (when the backend returned one)
        error_code: Backend error code (e.g. "ThrottlingException", "HTTP_503")
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @classmethod
    def success(cls, data: Optional[Any] = None, message: str = "ok") -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        return cls(status=status, message=message, error_code=error_code, data=data)

    @classmethod
    def transient_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Failure expected to clear on retry (throttling, timeouts, 5xx)."""
        return cls.error(OperationStatus.TRANSIENT_ERROR, message, error_code)

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Failure that retrying will not fix (validation, auth, bad request)."""
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)
