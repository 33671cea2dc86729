"""
Configuration module.

Exports:
    settings: Application settings instance
    get_settings: Function to get settings (for dependency injection)
    Settings: Settings class (for building test configurations)
"""

from config.settings import settings, get_settings, Settings, DATA_DIR, PROJECT_ROOT

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "DATA_DIR",
    "PROJECT_ROOT",
]
