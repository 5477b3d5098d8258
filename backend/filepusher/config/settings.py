"""
FilePusherSettings — runtime configuration.

Settings are read from a single JSON file whose keys mirror the historical
property names (``compress.folder``, ``exclude.extensions``,
``fileChangeCooldownSeconds`` ...). Validation is strict on structure but
lenient on the exclusion list: an unparseable list falls back to the
documented defaults instead of failing startup.

Example file:

    {
        "watched.folders": ["/srv/incoming"],
        "compress.folder": true,
        "exclude.extensions": ".html,.exe,.txt,.readme,.nfo,.link",
        "fileChangeCooldownSeconds": 120
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, FrozenSet, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError, ConfigNotFoundError

logger = logging.getLogger(__name__)


DEFAULT_EXCLUDE_EXTENSIONS = ".html,.exe,.txt,.readme,.nfo,.link"


def parse_extensions(value: Any) -> FrozenSet[str]:
    """
    Parse a comma-separated extension list into normalized extensions.

    Entries are stripped, lower-cased and given a leading dot if missing.
    Empty entries are dropped.

    Raises:
        ValueError: If the value is not a string or yields no extension
    """
    if not isinstance(value, str):
        raise ValueError(f"Extension list must be a string, got {type(value).__name__}")

    extensions = set()
    for raw in value.split(","):
        ext = raw.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        if ext == "." or any(c in ext for c in "/\\ "):
            raise ValueError(f"Invalid extension entry: {raw!r}")
        extensions.add(ext)

    if not extensions:
        raise ValueError("Extension list is empty")

    return frozenset(extensions)


class FilePusherSettings(BaseModel):
    """
    Complete runtime configuration.

    Field aliases are the keys used in the JSON file. Python code uses the
    attribute names.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    watched_folders: List[str] = Field(default_factory=list, alias="watched.folders")
    compress_folder: bool = Field(default=True, alias="compress.folder")
    exclude_extensions: str = Field(
        default=DEFAULT_EXCLUDE_EXTENSIONS, alias="exclude.extensions"
    )
    file_change_cooldown_seconds: int = Field(
        default=60, ge=0, alias="fileChangeCooldownSeconds"
    )
    scan_interval_seconds: float = Field(default=10.0, gt=0, alias="scan.intervalSeconds")
    archive_max_workers: int = Field(default=2, ge=1, alias="archive.maxWorkers")
    checksum_max_workers: int = Field(default=1, ge=1, alias="checksum.maxWorkers")
    catalog_db_path: str = Field(default="./filepusher.db", alias="catalog.dbPath")
    monitor_host: str = Field(default="127.0.0.1", alias="monitor.host")
    monitor_port: int = Field(default=8086, ge=1, le=65535, alias="monitor.port")

    @field_validator("watched_folders")
    @classmethod
    def validate_absolute_paths(cls, v: List[str]) -> List[str]:
        """Ensure every watched folder is absolute."""
        for folder in v:
            if not Path(folder).is_absolute():
                raise ValueError(f"Watched folder path must be absolute: {folder}")
        return v

    @field_validator("exclude_extensions", mode="before")
    @classmethod
    def fallback_exclude_extensions(cls, v: Any) -> str:
        """Replace an unparseable exclusion list with the defaults."""
        try:
            parse_extensions(v)
        except ValueError as e:
            logger.warning(
                f"Invalid exclude.extensions value {v!r} ({e}), "
                f"using defaults: {DEFAULT_EXCLUDE_EXTENSIONS}"
            )
            return DEFAULT_EXCLUDE_EXTENSIONS
        return v

    @property
    def excluded_extensions(self) -> FrozenSet[str]:
        """Normalized set of excluded extensions (e.g. ``{".txt", ".nfo"}``)."""
        return parse_extensions(self.exclude_extensions)


def load_settings(path: Union[str, Path]) -> FilePusherSettings:
    """
    Load settings from a JSON file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigError: If the file is not valid JSON or fails validation
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigNotFoundError(str(config_path))

    try:
        with open(config_path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be an object: {config_path}")

    try:
        settings = FilePusherSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e

    logger.info(
        f"Loaded configuration from {config_path}: "
        f"{len(settings.watched_folders)} watched folder(s), "
        f"cooldown={settings.file_change_cooldown_seconds}s"
    )
    return settings
