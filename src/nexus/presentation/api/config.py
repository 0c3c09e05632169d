"""API configuration adapter.

Bridges the centralized nexus_config settings with the API layer.
"""

from nexus_config.settings import Settings, get_settings


def get_api_settings() -> Settings:
    """Get settings from centralized configuration."""
    return get_settings()
