"""
Tests for configuration loading.

These tests verify:
1. Defaults match the documented values
2. JSON keys use the historical property names
3. An unparseable exclusion list falls back to defaults
4. Unreadable or invalid files raise ConfigError
"""

import json
from pathlib import Path

import pytest

from filepusher.config import (
    ConfigError,
    ConfigNotFoundError,
    DEFAULT_EXCLUDE_EXTENSIONS,
    FilePusherSettings,
    load_settings,
    parse_extensions,
)


def _write_config(tmp_path: Path, data) -> Path:
    path = tmp_path / "filepusher.json"
    path.write_text(json.dumps(data))
    return path


class TestParseExtensions:

    def test_default_list(self):
        assert parse_extensions(DEFAULT_EXCLUDE_EXTENSIONS) == {
            ".html", ".exe", ".txt", ".readme", ".nfo", ".link",
        }

    def test_normalizes_case_dots_and_whitespace(self):
        assert parse_extensions(" TXT, .Nfo ,,exe") == {".txt", ".nfo", ".exe"}

    def test_empty_list_is_rejected(self):
        with pytest.raises(ValueError):
            parse_extensions(" , ,")

    def test_non_string_is_rejected(self):
        with pytest.raises(ValueError):
            parse_extensions(["txt"])


class TestFilePusherSettings:

    def test_defaults(self):
        settings = FilePusherSettings()

        assert settings.compress_folder is True
        assert settings.exclude_extensions == DEFAULT_EXCLUDE_EXTENSIONS
        assert settings.archive_max_workers == 2
        assert ".txt" in settings.excluded_extensions

    def test_loads_aliased_keys(self, tmp_path):
        path = _write_config(tmp_path, {
            "watched.folders": [str(tmp_path)],
            "compress.folder": False,
            "exclude.extensions": ".log,.tmp",
            "fileChangeCooldownSeconds": 120,
        })

        settings = load_settings(path)

        assert settings.watched_folders == [str(tmp_path)]
        assert settings.compress_folder is False
        assert settings.excluded_extensions == {".log", ".tmp"}
        assert settings.file_change_cooldown_seconds == 120

    def test_invalid_exclusion_list_falls_back_to_defaults(self, tmp_path):
        path = _write_config(tmp_path, {"exclude.extensions": 42})

        settings = load_settings(path)

        assert settings.exclude_extensions == DEFAULT_EXCLUDE_EXTENSIONS

    def test_empty_exclusion_list_falls_back_to_defaults(self, tmp_path):
        path = _write_config(tmp_path, {"exclude.extensions": ","})

        settings = load_settings(path)

        assert settings.excluded_extensions == parse_extensions(DEFAULT_EXCLUDE_EXTENSIONS)

    def test_relative_watched_folder_is_rejected(self, tmp_path):
        path = _write_config(tmp_path, {"watched.folders": ["relative/dir"]})

        with pytest.raises(ConfigError):
            load_settings(path)

    def test_unknown_key_is_rejected(self, tmp_path):
        path = _write_config(tmp_path, {"rss.location": "/tmp/rss.xml"})

        with pytest.raises(ConfigError):
            load_settings(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            load_settings(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError):
            load_settings(path)
