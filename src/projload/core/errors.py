"""
Error types for projload path resolution, project evaluation and graph loading.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ir import WorkspaceDiagnostic


class ProjloadError(Exception):
    """Base exception for all projload errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class ProjectLoadError(ProjloadError):
    """
    Raised when a diagnostic is reported in Throw mode.

    Carries the diagnostic that aborted the load, so callers can identify
    the first offending path.
    """

    def __init__(self, diagnostic: WorkspaceDiagnostic):
        self.diagnostic = diagnostic
        context = ErrorContext(path=diagnostic.path, code=diagnostic.code.value) if diagnostic.path else None
        super().__init__(diagnostic.message, context)

    @property
    def path(self) -> str | None:
        return self.diagnostic.path


class InvalidPathError(ProjectLoadError):
    """
    Raised when a project or solution path is malformed.

    Examples:
    - Empty path
    - Embedded NUL characters
    """

    pass


class ProjectFileNotFoundError(ProjectLoadError):
    """Raised when a project or solution path does not name an existing file."""

    pass


class UnrecognizedProjectError(ProjectLoadError):
    """
    Raised when no loader is registered for a project file.

    Examples:
    - Extension not associated with any language
    - Extension associated with a language that has no loader
    """

    pass


class EvaluationError(ProjectLoadError):
    """Raised when the evaluation engine fails on a project file."""

    pass


class EvaluationFailure(ProjloadError):
    """
    Raised by an evaluation engine for a project file it cannot evaluate.

    The graph worker converts this into an ``EvaluationFailure`` diagnostic
    and applies the reporting mode of the project being loaded.
    """

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(message, ErrorContext(path=path, code="evaluation_failure"))


class SolutionFileError(ProjloadError):
    """Raised when a solution file cannot be read."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error.

    Attributes:
        path: Path that caused the error
        code: Short diagnostic code
    """

    path: str
    code: str

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "/src/App/App.csproj [file_not_found]"
        """
        return f"{self.path} [{self.code}]"


_ERRORS_BY_CODE: dict[str, type[ProjectLoadError]] = {
    "invalid_path": InvalidPathError,
    "file_not_found": ProjectFileNotFoundError,
    "unrecognized_project_type": UnrecognizedProjectError,
    "evaluation_failure": EvaluationError,
}


def make_load_error(diagnostic: WorkspaceDiagnostic) -> ProjectLoadError:
    """
    Helper to create the ProjectLoadError subclass matching a diagnostic.

    Args:
        diagnostic: The diagnostic being raised

    Returns:
        ProjectLoadError subclass instance carrying the diagnostic
    """
    error_type = _ERRORS_BY_CODE.get(diagnostic.code.value, ProjectLoadError)
    return error_type(diagnostic)
