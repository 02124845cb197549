"""Document store backends.

The protocol-based design allows multiple storage backends behind the same
driver: a process-local store for development and tests, and a DynamoDB
table for multi-instance deployments.
"""

from docstore.clients.store.dynamodb import DynamoDBDocumentStore
from docstore.clients.store.factory import create_document_store
from docstore.clients.store.memory import InMemoryDocumentStore
from docstore.clients.store.protocols import DocumentStore

__all__ = [
    "DocumentStore",
    "DynamoDBDocumentStore",
    "InMemoryDocumentStore",
    "create_document_store",
]
