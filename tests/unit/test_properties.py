"""Tests for GlobalProperties."""

from __future__ import annotations

import os

import pytest

from projload.core.properties import GlobalProperties


class TestGlobalProperties:
    def test_lookup_is_case_insensitive(self):
        props = GlobalProperties({"Configuration": "Release"})
        assert props["configuration"] == "Release"
        assert "CONFIGURATION" in props
        assert props.get("Platform") is None

    def test_first_spelling_is_kept(self):
        props = GlobalProperties({"Configuration": "Debug"}).with_items({"CONFIGURATION": "Release"})
        assert props.to_dict() == {"CONFIGURATION": "Release"}
        assert len(props) == 1

    def test_with_items_returns_new_mapping(self):
        original = GlobalProperties({"A": "1"})
        derived = original.with_items({"B": "2"})
        assert "B" not in original
        assert derived.to_dict() == {"A": "1", "B": "2"}

    def test_values_must_be_strings(self):
        with pytest.raises(TypeError):
            GlobalProperties({"A": 1})  # type: ignore[dict-item]

    def test_equality_ignores_case(self):
        assert GlobalProperties({"a": "1"}) == {"A": "1"}
        assert hash(GlobalProperties({"a": "1"})) == hash(GlobalProperties({"A": "1"}))


class TestSolutionDir:
    def test_trailing_separator(self, tmp_path):
        sln = tmp_path / "S.sln"
        props = GlobalProperties().with_solution_dir(str(sln))
        assert props["SolutionDir"] == str(tmp_path) + os.sep

    def test_not_set_for_missing_directory(self, tmp_path):
        props = GlobalProperties({"A": "1"})
        derived = props.with_solution_dir(str(tmp_path / "missing" / "S.sln"))
        assert derived is props

    def test_overrides_caller_value(self, tmp_path):
        props = GlobalProperties({"solutiondir": "/elsewhere/"})
        derived = props.with_solution_dir(str(tmp_path / "S.sln"))
        assert derived["SolutionDir"] == str(tmp_path) + os.sep
