"""
Loader settings, read from a TOML file.

Example projload.toml:

    [loader]
    skip_unrecognized_projects = true
    load_metadata_for_referenced_projects = false
    max_concurrency = 4

    [properties]
    Configuration = "Release"

    [extensions]
    pyproj = "Python"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ErrorContext, ProjloadError
from .worker import DEFAULT_MAX_CONCURRENCY


class SettingsError(ProjloadError):
    """Raised when a settings file is unreadable or malformed."""

    pass


@dataclass
class LoaderSettings:
    """Configuration surface of a ProjectLoader."""

    properties: dict[str, str] = field(default_factory=dict)
    extensions: dict[str, str] = field(default_factory=dict)
    skip_unrecognized_projects: bool = True
    load_metadata_for_referenced_projects: bool = False
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY


def load_settings(path: Path) -> LoaderSettings:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise SettingsError(str(exc), ErrorContext(path=str(path), code="settings")) from exc

    loader = data.get("loader", {})
    properties = data.get("properties", {})
    extensions = data.get("extensions", {})

    for table_name, table in (("properties", properties), ("extensions", extensions)):
        bad = [k for k, v in table.items() if not isinstance(v, str)]
        if bad:
            raise SettingsError(
                f"[{table_name}] values must be strings: {', '.join(sorted(bad))}",
                ErrorContext(path=str(path), code="settings"),
            )

    max_concurrency = loader.get("max_concurrency", DEFAULT_MAX_CONCURRENCY)
    if not isinstance(max_concurrency, int) or max_concurrency < 1:
        raise SettingsError(
            "loader.max_concurrency must be a positive integer",
            ErrorContext(path=str(path), code="settings"),
        )

    return LoaderSettings(
        properties=dict(properties),
        extensions=dict(extensions),
        skip_unrecognized_projects=loader.get("skip_unrecognized_projects", True),
        load_metadata_for_referenced_projects=loader.get(
            "load_metadata_for_referenced_projects", False
        ),
        max_concurrency=max_concurrency,
    )
