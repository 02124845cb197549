"""Service providers for the driver."""

from docstore.services.providers import get_settings

__all__ = ["get_settings"]
