"""
Evaluation engine protocol and session.

The evaluation engine is an external, stateful, non-reentrant component
that interprets a project file and reports its effective items. A session
owns one engine instance for the lifetime of a loader, creates it lazily,
serializes every call into it and closes it exactly once.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable, Mapping
from typing import Protocol, TypeVar, runtime_checkable

from .cancellation import CancellationToken
from .errors import EvaluationFailure
from .ir import EvaluationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class EvaluationEngine(Protocol):
    """
    External project evaluation engine.

    Implementations raise ``EvaluationFailure`` for project files they
    cannot evaluate. They are never called concurrently.
    """

    def evaluate(self, path: str, properties: Mapping[str, str]) -> EvaluationResult: ...

    def get_output_path(self, path: str, properties: Mapping[str, str]) -> str | None:
        """Cheap query for the output artifact path, without expanding items."""
        ...

    def close(self) -> None: ...


class EvaluationEngineSession:
    """
    Exclusive-access handle around one evaluation engine.

    Calls are made from worker threads so the event loop keeps processing
    other worklist items; a lock guarantees at most one call is inside the
    engine at any instant. The lock is a mutual-exclusion boundary only,
    with no fairness guarantee between waiting calls.
    """

    def __init__(self, engine_factory: Callable[[], EvaluationEngine]) -> None:
        self._engine_factory = engine_factory
        self._engine: EvaluationEngine | None = None
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def evaluate(
        self, path: str, properties: Mapping[str, str], cancel: CancellationToken
    ) -> EvaluationResult:
        cancel.raise_if_cancelled()
        return await asyncio.to_thread(
            self._call, path, cancel, lambda engine: engine.evaluate(path, properties)
        )

    async def get_output_path(
        self, path: str, properties: Mapping[str, str], cancel: CancellationToken
    ) -> str | None:
        cancel.raise_if_cancelled()
        return await asyncio.to_thread(
            self._call, path, cancel, lambda engine: engine.get_output_path(path, properties)
        )

    def _call(self, path: str, cancel: CancellationToken, fn: Callable[[EvaluationEngine], T]) -> T:
        with self._lock:
            if self._closed:
                raise RuntimeError("Evaluation engine session is closed")
            cancel.raise_if_cancelled()

            if self._engine is None:
                logger.debug("Starting evaluation engine")
                self._engine = self._engine_factory()

            started = time.perf_counter()
            try:
                return fn(self._engine)
            except OSError as exc:
                raise EvaluationFailure(path, f"Unable to read project file: {exc}") from exc
            finally:
                logger.debug("Engine call for %s took %.3fs", path, time.perf_counter() - started)

    def close(self) -> None:
        """Release the engine. Safe to call more than once; only the first call closes."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            engine, self._engine = self._engine, None

        if engine is not None:
            logger.debug("Closing evaluation engine")
            engine.close()

    def __enter__(self) -> EvaluationEngineSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
