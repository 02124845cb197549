"""Shared base class for settings modules."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class DocstoreSettings(BaseSettings):
    """Base class for driver settings sections.

    All settings sections inherit from this class to ensure consistent
    configuration behavior (env file loading, case sensitivity).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )
