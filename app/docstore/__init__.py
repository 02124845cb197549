"""Resilient document store driver.

Normalizes "not found", tracks misses on multi-key gets, backs off temporary
store errors and provides `atomic`, a CAS-guarded read-modify-write with
optional pessimistic locking.
"""

from docstore.clients.store import (
    DocumentStore,
    DynamoDBDocumentStore,
    InMemoryDocumentStore,
    create_document_store,
)
from docstore.driver import Driver
from docstore.errors import DriverError, ErrorCode, InvalidOperationError, StoreError
from docstore.models import (
    OPERATIONS,
    BatchGetResult,
    DocumentHandle,
    MultiGetEntry,
    MutationResult,
    OperationDirective,
)
from docstore.operations.classifiers import is_key_not_found, is_temporary_error

__all__ = [
    "BatchGetResult",
    "DocumentHandle",
    "DocumentStore",
    "Driver",
    "DriverError",
    "DynamoDBDocumentStore",
    "ErrorCode",
    "InMemoryDocumentStore",
    "InvalidOperationError",
    "MultiGetEntry",
    "MutationResult",
    "OPERATIONS",
    "OperationDirective",
    "StoreError",
    "create_document_store",
    "is_key_not_found",
    "is_temporary_error",
]
