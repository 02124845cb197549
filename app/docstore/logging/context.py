"""Per-call context binding for structured logging.

Binds key, operation and correlation metadata to every log entry emitted
while a driver call is in flight. Context lives in `contextvars`, so each
asyncio task sees only its own bindings.

Usage:
    from docstore.logging import bind_operation_context

    with bind_operation_context(operation="atomic", key="doc::1"):
        logger.info("atomic_started")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_operation_context(
    correlation_id: Optional[str] = None,
    operation: Optional[str] = None,
    key: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind call-scoped context to all logs within the context manager.

    Args:
        correlation_id: Unique call identifier. Auto-generated if not provided.
        operation: Driver operation name (e.g. "atomic", "get").
        key: Document key the call targets.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation ID in effect for the block.

    Example:
        with bind_operation_context(operation="atomic", key=key) as cid:
            logger.info("atomic_started")  # includes correlation_id=cid
    """
    context: dict[str, Any] = {
        "correlation_id": correlation_id or str(uuid.uuid4()),
    }

    if operation is not None:
        context["operation"] = operation

    if key is not None:
        context["key"] = key

    context.update(extra_context)

    # Previous values are restored on exit, so nested calls do not clobber
    # the outer context.
    with structlog.contextvars.bound_contextvars(**context):
        yield context["correlation_id"]
