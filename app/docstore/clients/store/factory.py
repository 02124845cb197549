"""Factory for creating document stores based on configuration."""

from typing import Optional

import structlog

from docstore.clients.store.dynamodb import DynamoDBDocumentStore
from docstore.clients.store.memory import InMemoryDocumentStore
from docstore.clients.store.protocols import DocumentStore
from docstore.configuration import StoreSettings

logger = structlog.get_logger()


def create_document_store(
    settings: Optional[StoreSettings] = None, backend: Optional[str] = None
) -> DocumentStore:
    """Create the document store selected by configuration.

    Args:
        settings: Store settings. Loaded from the environment if None.
        backend: Optional backend override (memory, dynamodb).
            If None, uses settings.backend

    Returns:
        Appropriate DocumentStore implementation

    Raises:
        ValueError: If unknown backend specified

    Examples:
        >>> store = create_document_store()  # Uses DOCSTORE_BACKEND
        >>> store = create_document_store(backend="memory")  # Force memory
    """
    if settings is None:
        from docstore.services.providers import get_settings

        settings = get_settings().store

    backend = backend or settings.backend

    if backend == "memory":
        logger.info("creating_in_memory_document_store")
        return InMemoryDocumentStore(default_lock_time=settings.lock_time_seconds)

    elif backend == "dynamodb":
        logger.info(
            "creating_dynamodb_document_store",
            table_name=settings.dynamodb_table_name,
        )
        return DynamoDBDocumentStore(
            table_name=settings.dynamodb_table_name,
            region=settings.aws_region,
            endpoint_url=settings.endpoint_url,
            default_lock_time=settings.lock_time_seconds,
        )

    else:
        raise ValueError(
            f"Unknown document store backend: {backend}. Supported: memory, dynamodb"
        )
