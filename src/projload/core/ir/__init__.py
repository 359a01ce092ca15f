"""
projload Intermediate Representation (IR) types.

All types are re-exported from this package.
"""

from .diagnostics import (
    DiagnosticCode,
    DiagnosticKind,
    DiagnosticReportingMode,
    DiagnosticReportingOptions,
    WorkspaceDiagnostic,
)
from .evaluation import EvaluationResult
from .identity import ProjectIdentity, SolutionIdentity
from .progress import ProjectLoadOperation, ProjectLoadOutcome, ProjectLoadProgress
from .project import ProjectDescription
from .solution import SolutionEntry, SolutionEntryKind, SolutionSnapshot

__all__ = [
    # Diagnostics
    "DiagnosticCode",
    "DiagnosticKind",
    "DiagnosticReportingMode",
    "DiagnosticReportingOptions",
    "WorkspaceDiagnostic",
    # Evaluation
    "EvaluationResult",
    # Identity
    "ProjectIdentity",
    "SolutionIdentity",
    # Progress
    "ProjectLoadOperation",
    "ProjectLoadOutcome",
    "ProjectLoadProgress",
    # Projects and solutions
    "ProjectDescription",
    "SolutionEntry",
    "SolutionEntryKind",
    "SolutionSnapshot",
]
