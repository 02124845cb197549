"""structlog wiring for the driver.

The driver only emits events; the host application decides where they go by
calling `configure_logging()` once at startup. Nothing here runs on import.

    from docstore.logging import configure_logging, get_module_logger

    configure_logging(log_level="DEBUG")
    logger = get_module_logger()
    logger.debug("store_get", key="doc::1")
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.typing import Processor

# Above CRITICAL: drops every record.
SILENT = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _apply(processors: List[Processor], level: int, force: bool = False) -> BoundLogger:
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=level, force=force)
    return structlog.stdlib.get_logger()


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Route driver events through structlog and the stdlib root logger.

    Production renders one JSON object per line; anything else gets the
    colored console renderer. Under pytest all output is dropped.

    Args:
        log_level: Level name (DEBUG, INFO, ...). Falls back to
            `Settings.LOG_LEVEL`.
        is_production: Force JSON rendering on or off. Falls back to
            `Settings.is_production`.

    Returns:
        A logger bound to the new configuration.
    """
    if _is_test_environment():
        logging.root.setLevel(SILENT)
        return _apply(
            [
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            SILENT,
            force=True,
        )

    if log_level is None or is_production is None:
        # Deferred: settings import the retry executor, which logs.
        from docstore.services.providers import get_settings

        settings = get_settings()
        if log_level is None:
            log_level = settings.LOG_LEVEL
        if is_production is None:
            is_production = settings.is_production

    processors = _shared_processors()
    processors.append(
        structlog.processors.JSONRenderer()
        if is_production
        else structlog.dev.ConsoleRenderer()
    )
    return _apply(processors, getattr(logging, log_level.upper(), logging.INFO))


def get_module_logger() -> BoundLogger:
    """Logger bound to the calling module.

    Binds `module_path` (the dotted module name) and `component` (its last
    segment), e.g. `docstore.driver.atomic` -> component `atomic`.

    The values ride on the lazy proxy, so a logger created at import time
    still picks up a later `configure_logging()`.
    """
    module_name = sys._getframe(1).f_globals.get("__name__")
    if not module_name:
        return structlog.get_logger(component="unknown")
    return structlog.get_logger(
        component=module_name.rsplit(".", 1)[-1], module_path=module_name
    )
