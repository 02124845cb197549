"""
Factory functions for dependency injection.

Provides process-scoped singleton providers for core driver services.
"""

from functools import lru_cache

from docstore.configuration import Settings


@lru_cache
def get_settings() -> Settings:
    """
    Get process-scoped settings singleton.

    This is the single source of truth for settings across the driver.
    The @lru_cache decorator ensures only ONE instance is created per process.

    Usage:
        from docstore.services.providers import get_settings
        settings = get_settings()

    Tests that change environment variables should call
    `get_settings.cache_clear()` afterwards.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()
