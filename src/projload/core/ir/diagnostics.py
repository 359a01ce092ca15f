"""
Diagnostic types for projload.

A diagnostic describes one problem met while loading a project graph. What
happens to it is decided by a reporting mode, chosen independently for
requested and for discovered projects.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class DiagnosticKind(StrEnum):
    """Severity of a workspace diagnostic."""

    FAILURE = "failure"
    WARNING = "warning"


class DiagnosticCode(StrEnum):
    """
    Classification of a load diagnostic.

    INVALID_PATH: Path is malformed
    FILE_NOT_FOUND: Path does not name an existing file
    UNRECOGNIZED_PROJECT_TYPE: No loader for the project file extension
    EVALUATION_FAILURE: Evaluation engine failed on the project file
    EVALUATION_WARNING: Non-fatal message produced by the evaluation engine
    """

    INVALID_PATH = "invalid_path"
    FILE_NOT_FOUND = "file_not_found"
    UNRECOGNIZED_PROJECT_TYPE = "unrecognized_project_type"
    EVALUATION_FAILURE = "evaluation_failure"
    EVALUATION_WARNING = "evaluation_warning"


class DiagnosticReportingMode(StrEnum):
    """
    What a reporter does with a diagnostic.

    LOG: Record it in the diagnostic log and continue
    THROW: Raise a ProjectLoadError carrying it
    IGNORE: Drop it
    """

    LOG = "log"
    THROW = "throw"
    IGNORE = "ignore"


class WorkspaceDiagnostic(BaseModel):
    """
    A single load diagnostic.

    Attributes:
        kind: Failure or warning
        code: Classification of the problem
        message: Human-readable description
        path: Offending path, if any
    """

    kind: DiagnosticKind
    code: DiagnosticCode
    message: str
    path: str | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class DiagnosticReportingOptions(BaseModel):
    """
    Reporting modes applied to one class of projects (requested or discovered).

    Attributes:
        on_path_failure: Mode for invalid or missing project paths
        on_loader_failure: Mode for unrecognized projects and evaluation failures
    """

    on_path_failure: DiagnosticReportingMode
    on_loader_failure: DiagnosticReportingMode

    model_config = ConfigDict(frozen=True)

    @classmethod
    def uniform(cls, mode: DiagnosticReportingMode) -> DiagnosticReportingOptions:
        return cls(on_path_failure=mode, on_loader_failure=mode)

    @classmethod
    def throw_for_all(cls) -> DiagnosticReportingOptions:
        return cls.uniform(DiagnosticReportingMode.THROW)

    @classmethod
    def log_for_all(cls) -> DiagnosticReportingOptions:
        return cls.uniform(DiagnosticReportingMode.LOG)
