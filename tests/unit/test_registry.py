"""Tests for LoaderRegistry."""

from __future__ import annotations

import pytest

from projload.core.registry import DEFAULT_EXTENSIONS, LoaderRegistry, ProjectFileLoader


class TestLoaderRegistry:
    def test_default_associations(self):
        registry = LoaderRegistry()
        assert registry.language_for("/src/App/App.csproj") == "C#"
        assert registry.language_for("/src/App/App.vbproj") == "Visual Basic"
        assert registry.language_for("/src/App/App.fsproj") == "F#"
        assert registry.extensions == DEFAULT_EXTENSIONS

    def test_extension_match_is_case_insensitive(self):
        registry = LoaderRegistry()
        loader = registry.loader_for("/src/App/App.CsProj")
        assert loader is not None
        assert loader.language == "C#"

    def test_unknown_extension(self):
        registry = LoaderRegistry()
        assert registry.loader_for("/src/App/App.pyproj") is None
        assert registry.loader_for("/src/App/Makefile") is None

    @pytest.mark.parametrize("extension", ["pyproj", ".pyproj", ".PYPROJ"])
    def test_associate_extension(self, extension):
        registry = LoaderRegistry()
        registry.associate_extension(extension, "Python")
        assert registry.language_for("/src/tool.pyproj") == "Python"

    def test_languages_share_a_loader(self):
        registry = LoaderRegistry()
        registry.associate_extension("csx", "C#")
        assert registry.loader_for("a.csx") is registry.loader_for("a.csproj")

    def test_register_custom_loader(self):
        class CustomLoader(ProjectFileLoader):
            pass

        registry = LoaderRegistry()
        custom = CustomLoader("C#")
        registry.register_loader(custom)
        assert registry.loader_for("a.csproj") is custom

    def test_empty_registry(self):
        registry = LoaderRegistry(extensions={})
        assert registry.loader_for("a.csproj") is None

    @pytest.mark.parametrize(
        ("extension", "language", "error"),
        [(None, "C#", TypeError), ("csproj", None, TypeError), (".", "C#", ValueError)],
    )
    def test_invalid_arguments(self, extension, language, error):
        with pytest.raises(error):
            LoaderRegistry().associate_extension(extension, language)
