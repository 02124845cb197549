"""Result types, error classification and batch reconciliation.

This module contains the status enums, the OperationResult dataclass used by
backend clients, the store error classifiers and the multi-get reconciler.
"""

from docstore.operations.batch import reconcile
from docstore.operations.classifiers import (
    classify_store_error,
    is_key_not_found,
    is_temporary_error,
)
from docstore.operations.result import OperationResult
from docstore.operations.status import ErrorKind, OperationStatus

__all__ = [
    "ErrorKind",
    "OperationResult",
    "OperationStatus",
    "classify_store_error",
    "is_key_not_found",
    "is_temporary_error",
    "reconcile",
]
