"""
projload - project graph loader.

Loads a build description (a single project file, or a solution file that
references many project files) into immutable, strongly-typed project
descriptions for downstream tooling.
"""

from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core import ir
from .core.errors import (
    EvaluationError,
    InvalidPathError,
    ProjectFileNotFoundError,
    ProjectLoadError,
    ProjloadError,
    UnrecognizedProjectError,
)
from .core.loader import ProjectLoader


def _read_version() -> str:
    """Installed distribution version, else the version in the source tree's pyproject.toml."""
    try:
        return _metadata_version("projload")
    except PackageNotFoundError:
        pass

    pyproject = _Path(__file__).resolve().parents[2] / "pyproject.toml"
    try:
        with pyproject.open("rb") as fh:
            return str(tomllib.load(fh)["project"]["version"])
    except (OSError, KeyError, tomllib.TOMLDecodeError):
        return "0.0.0"


__version__ = _read_version()

__all__ = [
    "__version__",
    "ir",
    "ProjectLoader",
    "ProjloadError",
    "ProjectLoadError",
    "InvalidPathError",
    "ProjectFileNotFoundError",
    "UnrecognizedProjectError",
    "EvaluationError",
]
