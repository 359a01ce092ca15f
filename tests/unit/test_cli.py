"""Tests for the projload command line."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from projload.cli import app

runner = CliRunner()

APP_PROJECT = """\
<Project Sdk="Microsoft.NET.Sdk">
  <ItemGroup>
    <ProjectReference Include="..\\Lib\\Lib.csproj" />
    <ProjectReference Include="..\\Tool\\Tool.unknownproj" />
  </ItemGroup>
</Project>
"""

LIB_PROJECT = '<Project Sdk="Microsoft.NET.Sdk" />\n'

SOLUTION = """\
Microsoft Visual Studio Solution File, Format Version 12.00
Project("{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}") = "App", "App\\App.csproj", "{00000000-0000-0000-0000-000000000001}"
EndProject
Global
EndGlobal
"""


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    for rel, text in {
        "App/App.csproj": APP_PROJECT,
        "App/Program.cs": "",
        "Lib/Lib.csproj": LIB_PROJECT,
        "Lib/Lib.cs": "",
        "Tool/Tool.unknownproj": "<Project />",
        "App.sln": SOLUTION,
    }.items():
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return tmp_path


class TestProjectCommand:
    def test_json_output(self, workspace):
        result = runner.invoke(app, ["project", str(workspace / "App" / "App.csproj"), "--json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert [p["name"] for p in payload["projects"]] == ["App", "Lib"]
        assert [d["code"] for d in payload["diagnostics"]] == ["unrecognized_project_type"]

    def test_strict_fails(self, workspace):
        result = runner.invoke(
            app, ["project", str(workspace / "App" / "App.csproj"), "--strict"]
        )

        assert result.exit_code == 1

    def test_missing_project(self, workspace):
        result = runner.invoke(app, ["project", str(workspace / "Nope.csproj")])

        assert result.exit_code == 1

    def test_property_option(self, workspace):
        result = runner.invoke(
            app,
            [
                "project",
                str(workspace / "Lib" / "Lib.csproj"),
                "-p",
                "Configuration=Release",
                "--json",
            ],
        )

        assert result.exit_code == 0, result.output
        (project,) = json.loads(result.stdout)["projects"]
        assert project["global_properties"] == {"Configuration": "Release"}
        assert project["output_path"].endswith(os.path.join("Release", "Lib.dll"))

    def test_bad_property_option(self, workspace):
        result = runner.invoke(
            app, ["project", str(workspace / "Lib" / "Lib.csproj"), "-p", "NoEquals"]
        )

        assert result.exit_code != 0

    def test_config_file_extension(self, workspace):
        config = workspace / "projload.toml"
        config.write_text('[extensions]\nunknownproj = "C#"\n')

        result = runner.invoke(
            app,
            ["project", str(workspace / "App" / "App.csproj"), "--config", str(config), "--json"],
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert [p["name"] for p in payload["projects"]] == ["App", "Lib", "Tool"]


class TestSolutionCommand:
    def test_table_output(self, workspace):
        result = runner.invoke(app, ["solution", str(workspace / "App.sln")])

        assert result.exit_code == 0, result.output
        assert "2 project(s)" in result.stdout
        assert "'.unknownproj'" in result.stdout
