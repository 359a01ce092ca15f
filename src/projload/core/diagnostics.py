"""
Diagnostic log and reporter.

The reporter applies a reporting mode to a diagnostic: LOG records it and
returns, THROW raises a ProjectLoadError carrying it, IGNORE drops it. The
top-level load call is the only boundary that lets a raised error escape to
the caller.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

from .errors import make_load_error
from .ir import (
    DiagnosticCode,
    DiagnosticKind,
    DiagnosticReportingMode,
    WorkspaceDiagnostic,
)

logger = logging.getLogger(__name__)


class DiagnosticLog:
    """Append-only, thread-safe list of diagnostics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: list[WorkspaceDiagnostic] = []

    def add(self, diagnostic: WorkspaceDiagnostic) -> None:
        with self._lock:
            self._entries.append(diagnostic)

    def snapshot(self) -> list[WorkspaceDiagnostic]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __iter__(self) -> Iterator[WorkspaceDiagnostic]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def failures(self) -> list[WorkspaceDiagnostic]:
        return [d for d in self.snapshot() if d.kind == DiagnosticKind.FAILURE]

    def with_code(self, code: DiagnosticCode) -> list[WorkspaceDiagnostic]:
        return [d for d in self.snapshot() if d.code == code]


class DiagnosticReporter:
    """Applies a reporting mode to diagnostics, recording logged ones in a DiagnosticLog."""

    def __init__(self, log: DiagnosticLog | None = None) -> None:
        self.log = log if log is not None else DiagnosticLog()

    def report(self, mode: DiagnosticReportingMode, diagnostic: WorkspaceDiagnostic) -> None:
        if mode == DiagnosticReportingMode.THROW:
            raise make_load_error(diagnostic)

        if mode == DiagnosticReportingMode.LOG:
            self.log.add(diagnostic)
            level = logging.WARNING if diagnostic.kind == DiagnosticKind.FAILURE else logging.INFO
            logger.log(level, "%s", diagnostic.message)

    def report_failure(
        self,
        mode: DiagnosticReportingMode,
        code: DiagnosticCode,
        message: str,
        path: str | None = None,
    ) -> None:
        self.report(
            mode,
            WorkspaceDiagnostic(kind=DiagnosticKind.FAILURE, code=code, message=message, path=path),
        )

    def report_warning(self, message: str, path: str | None = None) -> None:
        """Record a non-fatal message. Warnings are logged and never raised."""
        self.report(
            DiagnosticReportingMode.LOG,
            WorkspaceDiagnostic(
                kind=DiagnosticKind.WARNING,
                code=DiagnosticCode.EVALUATION_WARNING,
                message=message,
                path=path,
            ),
        )
