"""Thread-safe progress accounting for a single load."""

from __future__ import annotations

import threading
from collections.abc import Callable

from .ir import ProjectLoadOperation, ProjectLoadOutcome, ProjectLoadProgress

ProgressSink = Callable[[ProjectLoadProgress], None]


class ProgressTracker:
    """
    Counts completed worklist items and forwards each to an optional sink.

    The counter increment and the sink call happen under one lock, so the
    sink sees ``completed`` values in strictly increasing order even when
    items finish on different threads.
    """

    def __init__(self, sink: ProgressSink | None = None) -> None:
        self._sink = sink
        self._lock = threading.Lock()
        self._completed = 0

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def advance(
        self,
        file_path: str,
        operation: ProjectLoadOperation,
        outcome: ProjectLoadOutcome,
        elapsed: float,
    ) -> None:
        with self._lock:
            self._completed += 1
            if self._sink is not None:
                self._sink(
                    ProjectLoadProgress(
                        file_path=file_path,
                        operation=operation,
                        outcome=outcome,
                        elapsed=elapsed,
                        completed=self._completed,
                    )
                )
