"""Docstore configuration module - public API.

Centralized configuration management using Pydantic BaseSettings, plus the
per-call option resolver.

Exports:
    Settings: Main settings class (aggregator)
    DriverSettings: Driver-wide retry/atomic/miss defaults
    StoreSettings: Backend selection and connection settings
    DriverOptions: Options resolved for a single call

Example:
    ```python
    from docstore.services import get_settings

    settings = get_settings()
    lock = settings.driver.atomic_lock
    backend = settings.store.backend
    ```
"""

from docstore.configuration.driver import DriverSettings
from docstore.configuration.options import DriverOptions
from docstore.configuration.settings import Settings
from docstore.configuration.store import StoreSettings

__all__ = ["DriverOptions", "DriverSettings", "Settings", "StoreSettings"]
