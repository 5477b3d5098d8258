"""
Configuration loading.

Public API:
    FilePusherSettings — Validated runtime configuration
    load_settings — Load settings from a JSON file
    parse_extensions — Normalize a comma-separated extension list
"""

from .errors import ConfigError, ConfigNotFoundError
from .settings import (
    DEFAULT_EXCLUDE_EXTENSIONS,
    FilePusherSettings,
    load_settings,
    parse_extensions,
)

__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "DEFAULT_EXCLUDE_EXTENSIONS",
    "FilePusherSettings",
    "load_settings",
    "parse_extensions",
]
