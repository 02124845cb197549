"""Clients for the stores and services the driver talks to."""

from docstore.clients.cluster import ClusterInfoClient, lowest_node_version
from docstore.clients.store import (
    DocumentStore,
    DynamoDBDocumentStore,
    InMemoryDocumentStore,
    create_document_store,
)

__all__ = [
    "ClusterInfoClient",
    "DocumentStore",
    "DynamoDBDocumentStore",
    "InMemoryDocumentStore",
    "create_document_store",
    "lowest_node_version",
]
