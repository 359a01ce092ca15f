"""Tests for loader settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from projload.core.loader import ProjectLoader
from projload.core.settings import LoaderSettings, SettingsError, load_settings


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "projload.toml"
    path.write_text(text)
    return path


class TestLoadSettings:
    def test_defaults(self, tmp_path):
        settings = load_settings(_write(tmp_path, ""))
        assert settings == LoaderSettings()

    def test_all_sections(self, tmp_path):
        path = _write(
            tmp_path,
            """
[loader]
skip_unrecognized_projects = false
load_metadata_for_referenced_projects = true
max_concurrency = 2

[properties]
Configuration = "Release"

[extensions]
pyproj = "Python"
""",
        )

        settings = load_settings(path)

        assert settings.skip_unrecognized_projects is False
        assert settings.load_metadata_for_referenced_projects is True
        assert settings.max_concurrency == 2
        assert settings.properties == {"Configuration": "Release"}
        assert settings.extensions == {"pyproj": "Python"}

    def test_non_string_property(self, tmp_path):
        with pytest.raises(SettingsError, match="properties"):
            load_settings(_write(tmp_path, "[properties]\nWarningLevel = 4\n"))

    def test_bad_concurrency(self, tmp_path):
        with pytest.raises(SettingsError, match="max_concurrency"):
            load_settings(_write(tmp_path, "[loader]\nmax_concurrency = 0\n"))

    def test_malformed_toml(self, tmp_path):
        with pytest.raises(SettingsError):
            load_settings(_write(tmp_path, "[loader\n"))


def test_loader_from_settings():
    settings = LoaderSettings(
        properties={"Configuration": "Release"},
        extensions={"pyproj": "Python"},
        skip_unrecognized_projects=False,
        max_concurrency=2,
    )

    with ProjectLoader.from_settings(settings) as loader:
        assert loader.properties["configuration"] == "Release"
        assert loader.skip_unrecognized_projects is False
        assert loader.load_metadata_for_referenced_projects is False
        assert loader.max_concurrency == 2
        assert loader._registry.language_for("tool.pyproj") == "Python"
