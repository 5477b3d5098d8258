"""
Configuration errors.

A configuration that cannot be loaded is the only fatal error at startup.
Individual bad values fall back to documented defaults instead.
"""


class ConfigError(Exception):
    """Base exception for configuration failures."""

    pass


class ConfigNotFoundError(ConfigError):
    """Configuration file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Configuration file not found: {path}")
