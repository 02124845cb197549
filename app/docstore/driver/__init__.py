"""Driver layer: public Driver plus the façade and atomic engine it composes."""

from docstore.driver.atomic import AtomicEngine
from docstore.driver.callbacks import supports_callback
from docstore.driver.driver import Driver
from docstore.driver.facade import SUPPORTED_OPERATIONS, WriteFacade
from docstore.driver.passthrough import AsyncPassthrough, SyncPassthrough
from docstore.driver.reads import get_document, get_documents

__all__ = [
    "AsyncPassthrough",
    "AtomicEngine",
    "Driver",
    "SUPPORTED_OPERATIONS",
    "SyncPassthrough",
    "WriteFacade",
    "get_document",
    "get_documents",
    "supports_callback",
]
