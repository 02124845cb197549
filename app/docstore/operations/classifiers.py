"""Error classifiers for store errors.

Different store transport paths surface the same condition differently: the
binary protocol reports a numeric code, while view and query paths only carry
a message. These predicates normalize all of them to one semantic so the rest
of the driver can trust the classification instead of re-inspecting raw
errors.

Key Functions:
- is_key_not_found(): "key not found" in any of its spellings
- is_temporary_error(): temporary failure the store expects to clear on retry
- classify_store_error(): either of the above as an ErrorKind tag

Usage:
    from docstore.operations.classifiers import is_key_not_found

    try:
        doc = await store.get(key)
    except StoreError as exc:
        if is_key_not_found(exc):
            doc = None
        else:
            raise
"""

from typing import Any, Optional

from docstore.errors import ErrorCode
from docstore.operations.status import ErrorKind

KEY_NOT_FOUND_MESSAGE = "key not found"
KEY_DOES_NOT_EXIST_MESSAGE = "key does not exist"
TEMPORARY_FAILURE_MESSAGE = "Temporary failure"


def _error_code(err: Any) -> Any:
    return getattr(err, "code", None)


def _error_message(err: Any) -> Optional[str]:
    message = getattr(err, "message", None)
    if isinstance(message, str) and message:
        return message
    if isinstance(err, BaseException) and err.args:
        return str(err)
    return None


def is_key_not_found(err: Any) -> bool:
    """Determine if an error is a "key not found" error.

    Args:
        err: Error reported by the store (any object; `None` is allowed)

    Returns:
        True when the code is the canonical not-found code (or stringifies
        to the legacy "13"), or the message says the key is missing.

    Example:
        >>> is_key_not_found(StoreError("key not found", code=ErrorCode.KEY_NOT_FOUND))
        True
    """
    if err is None:
        return False

    code = _error_code(err)
    if code and code == ErrorCode.KEY_NOT_FOUND:
        return True

    message = _error_message(err)
    if message:
        if message == KEY_NOT_FOUND_MESSAGE:
            return True
        if KEY_DOES_NOT_EXIST_MESSAGE in message:
            return True
        if KEY_NOT_FOUND_MESSAGE in message:
            return True

    if code and str(code) == str(int(ErrorCode.KEY_NOT_FOUND)):
        return True

    return False


def is_temporary_error(err: Any) -> bool:
    """Determine if an error is a temporary store failure.

    Args:
        err: Error reported by the store (any object; `None` is allowed)

    Returns:
        True when the code is the canonical temporary-failure code (or
        stringifies to the legacy "11"), or the message mentions a
        temporary failure.
    """
    if err is None:
        return False

    code = _error_code(err)
    if code and code == ErrorCode.TEMPORARY_FAILURE:
        return True

    message = _error_message(err)
    if message and TEMPORARY_FAILURE_MESSAGE in message:
        return True

    if code and str(code) == str(int(ErrorCode.TEMPORARY_FAILURE)):
        return True

    return False


def classify_store_error(err: Any) -> ErrorKind:
    """Tag a store error with its ErrorKind.

    Not-found takes precedence over temporary when an error matches both.
    """
    if is_key_not_found(err):
        return ErrorKind.NOT_FOUND
    if is_temporary_error(err):
        return ErrorKind.TRANSIENT
    return ErrorKind.OTHER
