"""
Project graph worker.

Walks the project-to-project reference graph starting from a set of
requested project paths, evaluating every unique project exactly once.

Algorithm:
1. Seed a FIFO worklist with the requested paths, tagged as requested.
2. A bounded pool of tasks drains the worklist. For each item:
   a. resolve the path (requested or discovered path-failure mode)
   b. skip it if its canonical path was already visited, otherwise mark it
      visited and assign or reuse its identity
   c. pick a loader by extension (loader-failure mode when none)
   d. for discovered projects, optionally short-circuit to a metadata-only
      description when the prebuilt output exists
   e. otherwise evaluate it (loader-failure mode on EvaluationFailure)
   f. enqueue its project references as discovered items
   g. advance progress
3. When the worklist is empty, build descriptions: requested projects in
   requested order, then discovered projects in discovery order.

Dequeue, path resolution and the visited check run without yielding to the
event loop, so they are atomic with respect to the other tasks, and every
requested item is dequeued before any discovered one. The engine session is
the only serialization point; the other tasks keep resolving and
post-processing while one evaluation is in flight.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .cancellation import CancellationToken
from .diagnostics import DiagnosticReporter
from .engine import EvaluationEngineSession
from .errors import EvaluationFailure
from .identity_map import ProjectIdentityMap
from .ir import (
    DiagnosticCode,
    DiagnosticReportingOptions,
    EvaluationResult,
    ProjectDescription,
    ProjectIdentity,
    ProjectLoadOperation,
    ProjectLoadOutcome,
)
from .paths import PathResolver, canonical_key
from .progress import ProgressSink, ProgressTracker
from .properties import GlobalProperties
from .registry import LoaderRegistry, ProjectFileLoader

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 4


@dataclass
class _WorkItem:
    path: str
    base_directory: str
    requested_index: int | None = None

    @property
    def is_requested(self) -> bool:
        return self.requested_index is not None


@dataclass
class _LoadedProject:
    identity: ProjectIdentity
    path: str
    language: str
    visit_order: int
    requested_index: int | None
    result: EvaluationResult | None = None
    output_path: str | None = None
    reference_keys: list[str] = field(default_factory=list)


class GraphWorker:
    """Loads one project graph. A worker is single-use."""

    def __init__(
        self,
        *,
        reporter: DiagnosticReporter,
        path_resolver: PathResolver,
        registry: LoaderRegistry,
        session: EvaluationEngineSession,
        requested_paths: Sequence[str],
        base_directory: str,
        global_properties: GlobalProperties,
        requested_options: DiagnosticReportingOptions,
        discovered_options: DiagnosticReportingOptions,
        identity_map: ProjectIdentityMap | None = None,
        progress: ProgressSink | None = None,
        prefer_metadata_for_referenced_projects: bool = False,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self._reporter = reporter
        self._resolver = path_resolver
        self._registry = registry
        self._session = session
        self._requested_paths = list(requested_paths)
        self._base_directory = base_directory
        self._properties = global_properties
        self._requested_options = requested_options
        self._discovered_options = discovered_options
        self._identity_map = identity_map if identity_map is not None else ProjectIdentityMap()
        self._progress = ProgressTracker(progress)
        self._prefer_metadata = prefer_metadata_for_referenced_projects
        self._max_concurrency = max(1, max_concurrency)

        self._configuration = global_properties.get("Configuration")
        self._visited: set[str] = set()
        self._loaded: dict[str, _LoadedProject] = {}
        self._queue: asyncio.Queue[_WorkItem] | None = None
        self._started = False

    async def load(self, cancel: CancellationToken | None = None) -> list[ProjectDescription]:
        if self._started:
            raise RuntimeError("GraphWorker instances are single-use")
        self._started = True
        cancel = cancel or CancellationToken()

        self._queue = asyncio.Queue()
        for index, path in enumerate(self._requested_paths):
            self._queue.put_nowait(_WorkItem(path, self._base_directory, requested_index=index))

        await self._drain_all(cancel)
        return self._build_descriptions()

    async def _drain_all(self, cancel: CancellationToken) -> None:
        assert self._queue is not None
        tasks = [
            asyncio.create_task(self._drain(cancel), name=f"projload-worker-{i}")
            for i in range(self._max_concurrency)
        ]
        joined = asyncio.create_task(self._queue.join())
        try:
            await asyncio.wait([joined, *tasks], return_when=asyncio.FIRST_COMPLETED)
        finally:
            joined.cancel()
            for task in tasks:
                task.cancel()
            results = await asyncio.gather(joined, *tasks, return_exceptions=True)

        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, asyncio.CancelledError):
                raise result

        # Cancellation raised from a token check inside a task
        cancel.raise_if_cancelled()

    async def _drain(self, cancel: CancellationToken) -> None:
        assert self._queue is not None
        while True:
            item = await self._queue.get()
            try:
                cancel.raise_if_cancelled()
                started = time.perf_counter()
                path, operation, outcome = await self._process(item, cancel)
                self._progress.advance(path, operation, outcome, time.perf_counter() - started)
            finally:
                self._queue.task_done()

    async def _process(
        self, item: _WorkItem, cancel: CancellationToken
    ) -> tuple[str, ProjectLoadOperation, ProjectLoadOutcome]:
        options = self._requested_options if item.is_requested else self._discovered_options

        absolute = PathResolver.get_absolute_path(item.path, item.base_directory)
        if absolute is not None and canonical_key(absolute) in self._visited:
            # Also collapses a requested path listed twice (e.g. two configurations)
            logger.debug("Skipping already visited project %s", absolute)
            return absolute, ProjectLoadOperation.RESOLVE, ProjectLoadOutcome.SKIPPED

        path = self._resolver.resolve_project_path(
            item.path, item.base_directory, options.on_path_failure
        )
        if path is None:
            if absolute is not None:
                self._visited.add(canonical_key(absolute))
            return absolute or item.path, ProjectLoadOperation.RESOLVE, ProjectLoadOutcome.FAILED

        key = canonical_key(path)
        self._visited.add(key)
        identity = self._identity_map.get_or_create(path, self._configuration)

        loader = self._registry.loader_for(path)
        if loader is None:
            self._reporter.report_failure(
                options.on_loader_failure,
                DiagnosticCode.UNRECOGNIZED_PROJECT_TYPE,
                f"Cannot open project '{path}' because the file extension "
                f"'{os.path.splitext(path)[1]}' is not associated with a language.",
                path=path,
            )
            return path, ProjectLoadOperation.RESOLVE, ProjectLoadOutcome.FAILED

        loaded = _LoadedProject(
            identity=identity,
            path=path,
            language=loader.language,
            visit_order=len(self._visited),
            requested_index=item.requested_index,
        )

        if self._prefer_metadata and not item.is_requested:
            output_path = await self._existing_output_path(loader, path, cancel)
            if output_path is not None:
                logger.debug("Using prebuilt output %s for %s", output_path, path)
                loaded.output_path = output_path
                self._loaded[key] = loaded
                return path, ProjectLoadOperation.METADATA, ProjectLoadOutcome.METADATA_ONLY

        logger.debug("Evaluating %s", path)
        try:
            result = await loader.load(self._session, path, self._properties, cancel)
        except EvaluationFailure as exc:
            self._reporter.report_failure(
                options.on_loader_failure,
                DiagnosticCode.EVALUATION_FAILURE,
                f"Failed to evaluate project '{path}': {exc.message}",
                path=path,
            )
            return path, ProjectLoadOperation.EVALUATE, ProjectLoadOutcome.FAILED

        for message in result.diagnostics:
            self._reporter.report_warning(message, path=path)

        loaded.result = result
        loaded.output_path = result.output_path
        project_dir = os.path.dirname(path)
        for reference in result.project_references:
            reference_path = PathResolver.get_absolute_path(reference, project_dir)
            if reference_path is not None:
                loaded.reference_keys.append(canonical_key(reference_path))
            self._queue.put_nowait(_WorkItem(reference, project_dir))  # type: ignore[union-attr]

        self._loaded[key] = loaded
        return path, ProjectLoadOperation.EVALUATE, ProjectLoadOutcome.LOADED

    async def _existing_output_path(
        self, loader: ProjectFileLoader, path: str, cancel: CancellationToken
    ) -> str | None:
        """Output artifact path if it already exists on disk. No staleness check is made."""
        try:
            output_path = await loader.get_output_path(self._session, path, self._properties, cancel)
        except EvaluationFailure:
            # Full evaluation reports the failure under the loader-failure mode
            return None
        if output_path and os.path.isfile(output_path):
            return output_path
        return None

    def _build_descriptions(self) -> list[ProjectDescription]:
        requested = sorted(
            (p for p in self._loaded.values() if p.requested_index is not None),
            key=lambda p: p.requested_index,  # type: ignore[arg-type,return-value]
        )
        discovered = sorted(
            (p for p in self._loaded.values() if p.requested_index is None),
            key=lambda p: p.visit_order,
        )
        return [self._describe(p) for p in [*requested, *discovered]]

    def _describe(self, project: _LoadedProject) -> ProjectDescription:
        properties = self._properties.to_dict()

        if project.result is None:
            return ProjectDescription(
                identity=project.identity,
                name=Path(project.output_path or project.path).stem,
                language=project.language,
                file_path=project.path,
                output_path=project.output_path,
                global_properties=properties,
                is_metadata_only=True,
            )

        # References to projects that failed under Log mode were reported already
        references: list[ProjectIdentity] = []
        for key in project.reference_keys:
            target = self._loaded.get(key)
            if target is not None and target.identity not in references:
                references.append(target.identity)

        result = project.result
        project_dir = os.path.dirname(project.path)
        return ProjectDescription(
            identity=project.identity,
            name=result.name,
            language=project.language,
            file_path=project.path,
            output_path=result.output_path,
            documents=tuple(os.path.normpath(os.path.join(project_dir, d)) for d in result.documents),
            project_references=tuple(references),
            metadata_references=result.metadata_references,
            compilation_options=dict(result.compilation_options),
            global_properties=properties,
        )
