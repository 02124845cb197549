"""Structured logging infrastructure.

This package provides logging configuration and utilities for the driver
using structlog.

Public API:
    - configure_logging(): Initialize logging for the host application
    - get_module_logger(): Get a logger for the calling module
    - bind_operation_context(): Context manager for call-scoped logging

Example:
    from docstore.logging import configure_logging, get_module_logger

    configure_logging()

    logger = get_module_logger()
    logger.info("module_initialized")
"""

from docstore.logging.setup import configure_logging, get_module_logger
from docstore.logging.context import bind_operation_context

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_operation_context",
]
