"""
Path resolution for solution and project files.

Turns a raw path (possibly relative, possibly using Windows separators as
found in solution files) into an absolute, normalized path naming an
existing file. Failures are reported through the DiagnosticReporter.
"""

from __future__ import annotations

import errno
import os
import stat

from .diagnostics import DiagnosticReporter
from .ir import DiagnosticCode, DiagnosticReportingMode


class PathResolver:
    def __init__(self, reporter: DiagnosticReporter) -> None:
        self._reporter = reporter

    def resolve_project_path(
        self, path: str, base_directory: str, mode: DiagnosticReportingMode
    ) -> str | None:
        """
        Resolve a project file path against ``base_directory``.

        Returns:
            Absolute path, or None when the failure was reported in LOG or
            IGNORE mode (THROW mode raises instead).
        """
        return self._resolve(path, base_directory, mode, kind="project")

    def resolve_solution_path(
        self, path: str, base_directory: str, mode: DiagnosticReportingMode
    ) -> str | None:
        return self._resolve(path, base_directory, mode, kind="solution")

    @staticmethod
    def get_absolute_path(path: str, base_directory: str) -> str | None:
        """Absolute, normalized form of ``path`` without checking existence or reporting."""
        return _try_get_absolute_path(path, base_directory)

    def _resolve(
        self, path: str, base_directory: str, mode: DiagnosticReportingMode, kind: str
    ) -> str | None:
        if path is None:
            raise TypeError("path must not be None")

        absolute = _try_get_absolute_path(path, base_directory)
        is_file = False
        if absolute is not None:
            try:
                is_file = stat.S_ISREG(os.stat(absolute).st_mode)
            except OSError as exc:
                if exc.errno == errno.ENAMETOOLONG:
                    absolute = None

        if absolute is None:
            self._reporter.report_failure(
                mode,
                DiagnosticCode.INVALID_PATH,
                f"Invalid {kind} file path: '{path}'",
                path=path,
            )
            return None

        if not is_file:
            self._reporter.report_failure(
                mode,
                DiagnosticCode.FILE_NOT_FOUND,
                f"{kind.capitalize()} file not found: '{absolute}'",
                path=absolute,
            )
            return None

        return absolute


def _try_get_absolute_path(path: str, base_directory: str) -> str | None:
    if not path or not path.strip() or "\0" in path:
        return None

    if os.sep == "/":
        path = path.replace("\\", "/")

    try:
        joined = os.path.join(base_directory, path)
        return os.path.normpath(os.path.abspath(joined))
    except (TypeError, ValueError):
        return None


def canonical_key(path: str) -> str:
    """Key under which two spellings of the same file path compare equal."""
    return os.path.normcase(os.path.normpath(path)).casefold()
