"""Status and classification enumerations.

`OperationStatus` describes the outcome of a low-level backend call (see
`OperationResult`). `ErrorKind` is the classification tag the driver derives
from a store error; it is recomputed on every inspection and never stored.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for low-level backend call results.

    Attributes:
        SUCCESS: Call completed successfully
        TRANSIENT_ERROR: Retryable error (throttling, overload, timeout)
        PERMANENT_ERROR: Non-retryable error (validation, auth)
        CONFLICT: A conditional check rejected the call
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    CONFLICT = "conflict"


class ErrorKind(Enum):
    """Classification of a store error.

    Attributes:
        NOT_FOUND: The key does not exist
        TRANSIENT: Expected to resolve on retry
        OTHER: Anything else; never retried by the write façade
    """

    NOT_FOUND = "not_found"
    TRANSIENT = "transient"
    OTHER = "other"
