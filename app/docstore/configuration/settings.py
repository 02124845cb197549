"""Docstore configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from docstore.configuration.driver import DriverSettings
from docstore.configuration.store import StoreSettings


class Settings(BaseSettings):
    """Docstore configuration settings - main aggregator.

    Aggregates the settings sections into a single configuration object:

    - **driver**: retry, atomic and miss-visibility defaults
    - **store**: backend selection and connection details

    Environment Variables:
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        ENVIRONMENT: Deployment environment name (default: development)

    Example:
        ```python
        from docstore.services import get_settings

        settings = get_settings()

        backend = settings.store.backend
        if settings.is_production:
            # Production-specific logic...
        ```
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    driver: DriverSettings
    store: StoreSettings

    @property
    def is_production(self) -> bool:
        """Check if the driver is running in production.

        Returns:
            True if ENVIRONMENT is "production", False otherwise.
        """
        return self.ENVIRONMENT.lower() == "production"

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            "driver": DriverSettings,
            "store": StoreSettings,
        }

        for name, settings_cls in settings_map.items():
            if name not in kwargs:
                kwargs[name] = settings_cls()

        super().__init__(**kwargs)
