"""Configuration module with YAML and environment variable support."""

from .settings import ComparisonSettings, Settings, get_settings, settings


__all__ = [
    "ComparisonSettings",
    "Settings",
    "get_settings",
    "settings",
]
