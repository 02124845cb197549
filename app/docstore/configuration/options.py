"""Per-call option resolution.

Options are resolved once per call in a fixed order, each layer overriding
the previous one:

    hardcoded defaults  <-  driver-wide settings  <-  per-call options

Recognized keys are consumed into a `DriverOptions`; everything else in the
per-call bag is forwarded untouched to the store call as store options.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from docstore.configuration.driver import DriverSettings
from docstore.resilience.retry import RetryConfiguration, retry_on_any_error
from docstore.operations.classifiers import is_temporary_error


@dataclass(frozen=True)
class DriverOptions:
    """Resolved driver options for one call.

    Attributes mirror `DriverSettings`; see there for meaning and defaults.
    """

    retry_temporary_errors: bool = False
    temp_retry_times: int = 5
    temp_retry_interval: int = 50
    atomic_retry_times: int = 5
    atomic_retry_interval: int = 0
    atomic_lock: bool = True
    missing: bool = True
    save_options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[DriverSettings] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "DriverOptions":
        """Build driver-wide options from settings plus constructor overrides."""
        base = cls()
        if settings is not None:
            base = base.merged(settings.model_dump(by_alias=False))[0]
        if overrides:
            base = base.merged(overrides)[0]
        return base

    @classmethod
    def option_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def merged(
        self, overrides: Optional[Mapping[str, Any]] = None
    ) -> Tuple["DriverOptions", Dict[str, Any]]:
        """Apply per-call overrides.

        Args:
            overrides: Per-call option bag. `None` values do not override.

        Returns:
            Tuple of (resolved options, remaining store options)
        """
        if not overrides:
            return self, {}

        names = self.option_names()
        recognized = {
            k: v for k, v in overrides.items() if k in names and v is not None
        }
        store_options = {k: v for k, v in overrides.items() if k not in names}
        resolved = replace(self, **recognized) if recognized else self
        return resolved, store_options

    def temporary_retry(self) -> RetryConfiguration:
        """Retry policy for the write façade."""
        return RetryConfiguration(
            max_attempts=self.temp_retry_times if self.retry_temporary_errors else 1,
            interval_ms=self.temp_retry_interval,
            retry_predicate=is_temporary_error,
        )

    def atomic_retry(self) -> RetryConfiguration:
        """Retry policy for the atomic engine: any failure is retried."""
        return RetryConfiguration(
            max_attempts=self.atomic_retry_times,
            interval_ms=self.atomic_retry_interval,
            retry_predicate=retry_on_any_error,
        )
