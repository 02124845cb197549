"""Driver-wide behavior settings."""

from typing import Any, Dict

from pydantic import Field

from docstore.configuration.base import DocstoreSettings


class DriverSettings(DocstoreSettings):
    """Driver-wide defaults for retries, atomic operations and misses.

    Every field can be overridden per call (see `DriverOptions`).

    Environment Variables:
        DOCSTORE_RETRY_TEMPORARY_ERRORS: Back off temporary store errors (default: False)
        DOCSTORE_TEMP_RETRY_TIMES: Attempts when backing off temporary errors (default: 5)
        DOCSTORE_TEMP_RETRY_INTERVAL: Milliseconds between those attempts (default: 50)
        DOCSTORE_ATOMIC_RETRY_TIMES: Attempts made by atomic() (default: 5)
        DOCSTORE_ATOMIC_RETRY_INTERVAL: Milliseconds between atomic attempts (default: 0)
        DOCSTORE_ATOMIC_LOCK: Use get_and_lock in atomic() (default: True)
        DOCSTORE_MISSING: Return misses from multi-key get (default: True)
        DOCSTORE_SAVE_OPTIONS: JSON object merged into atomic writes (default: {})

    Example:
        ```python
        from docstore.services import get_settings

        settings = get_settings()

        if settings.driver.retry_temporary_errors:
            attempts = settings.driver.temp_retry_times
        ```
    """

    retry_temporary_errors: bool = Field(
        default=False,
        alias="DOCSTORE_RETRY_TEMPORARY_ERRORS",
        description="Automatically back off and retry temporary store errors",
    )
    temp_retry_times: int = Field(
        default=5,
        ge=1,
        alias="DOCSTORE_TEMP_RETRY_TIMES",
        description="Attempts to make when backing off temporary errors",
    )
    temp_retry_interval: int = Field(
        default=50,
        ge=0,
        alias="DOCSTORE_TEMP_RETRY_INTERVAL",
        description="Milliseconds to wait between temporary-error retries",
    )
    atomic_retry_times: int = Field(
        default=5,
        ge=1,
        alias="DOCSTORE_ATOMIC_RETRY_TIMES",
        description="Attempts to make within atomic()",
    )
    atomic_retry_interval: int = Field(
        default=0,
        ge=0,
        alias="DOCSTORE_ATOMIC_RETRY_INTERVAL",
        description="Milliseconds to wait between atomic() attempts",
    )
    atomic_lock: bool = Field(
        default=True,
        alias="DOCSTORE_ATOMIC_LOCK",
        description="Use get_and_lock (pessimistic) instead of get in atomic()",
    )
    missing: bool = Field(
        default=True,
        alias="DOCSTORE_MISSING",
        description="Return missing keys from multi-key get",
    )
    save_options: Dict[str, Any] = Field(
        default_factory=dict,
        alias="DOCSTORE_SAVE_OPTIONS",
        description="Store options merged into the final write of atomic()",
    )
