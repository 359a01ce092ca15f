"""
Caller-facing project loader.

A ProjectLoader owns the loader-lifetime state: the diagnostic reporter,
the extension registry, the global properties and one evaluation engine
session shared by every load until the loader is closed. Each load call
derives its own immutable properties and runs a fresh GraphWorker.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable, Mapping

from .assembler import SolutionAssembler
from .cancellation import CancellationToken
from .diagnostics import DiagnosticLog, DiagnosticReporter
from .errors import ProjloadError
from .engine import EvaluationEngine, EvaluationEngineSession
from .identity_map import ProjectIdentityMap
from .ir import (
    DiagnosticReportingMode,
    DiagnosticReportingOptions,
    ProjectDescription,
    SolutionEntry,
    SolutionSnapshot,
)
from .paths import PathResolver
from .progress import ProgressSink
from .properties import GlobalProperties
from .registry import LoaderRegistry
from .settings import LoaderSettings
from .solution_file import read_solution_file
from .static_engine import StaticProjectEngine
from .worker import DEFAULT_MAX_CONCURRENCY, GraphWorker

logger = logging.getLogger(__name__)


class ProjectLoader:
    """
    Loads solutions and projects into ProjectDescriptions.

    Attributes:
        load_metadata_for_referenced_projects: Use existing output artifacts
            of discovered projects instead of evaluating them. No staleness
            check is made against the project sources.
        skip_unrecognized_projects: Log (rather than raise) path, extension
            and evaluation failures for projects that are not explicitly
            requested by ``load_project``. A project is unrecognized when its
            path is invalid, its file does not exist, its extension is not
            associated with a language, or its evaluation fails.
        max_concurrency: Number of tasks draining the worklist.
    """

    def __init__(
        self,
        properties: Mapping[str, str] | None = None,
        *,
        load_metadata_for_referenced_projects: bool = False,
        skip_unrecognized_projects: bool = True,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        engine_factory: Callable[[], EvaluationEngine] | None = None,
        registry: LoaderRegistry | None = None,
        reporter: DiagnosticReporter | None = None,
        solution_reader: Callable[[str], list[SolutionEntry]] = read_solution_file,
    ) -> None:
        self.load_metadata_for_referenced_projects = load_metadata_for_referenced_projects
        self.skip_unrecognized_projects = skip_unrecognized_projects
        self.max_concurrency = max_concurrency

        self.reporter = reporter or DiagnosticReporter()
        self._path_resolver = PathResolver(self.reporter)
        self._registry = registry or LoaderRegistry()
        self._solution_reader = solution_reader
        self._session = EvaluationEngineSession(engine_factory or StaticProjectEngine)

        self._properties_guard = threading.Lock()
        self._properties = GlobalProperties(properties)

    @classmethod
    def from_settings(cls, settings: LoaderSettings, **kwargs) -> ProjectLoader:
        loader = cls(
            settings.properties,
            load_metadata_for_referenced_projects=settings.load_metadata_for_referenced_projects,
            skip_unrecognized_projects=settings.skip_unrecognized_projects,
            max_concurrency=settings.max_concurrency,
            **kwargs,
        )
        for extension, language in settings.extensions.items():
            loader.associate_extension(extension, language)
        return loader

    @property
    def properties(self) -> GlobalProperties:
        """Global properties, as passed to the engine (like ``/property:name=value``)."""
        with self._properties_guard:
            return self._properties

    @properties.setter
    def properties(self, value: Mapping[str, str]) -> None:
        """Replace the global properties. Loads already in flight keep their snapshot."""
        new_properties = GlobalProperties(value)
        with self._properties_guard:
            self._properties = new_properties

    @property
    def diagnostics(self) -> DiagnosticLog:
        return self.reporter.log

    def associate_extension(self, extension: str, language: str) -> None:
        """
        Associate a project file extension with a language.

        Must be called before any load that needs it; not safe to call while
        a load is in flight.
        """
        self._registry.associate_extension(extension, language)

    def _unrecognized_project_mode(self) -> DiagnosticReportingMode:
        if self.skip_unrecognized_projects:
            return DiagnosticReportingMode.LOG
        return DiagnosticReportingMode.THROW

    def _solution_properties(self, solution_path: str) -> GlobalProperties:
        with self._properties_guard:
            return self._properties.with_solution_dir(solution_path)

    def _create_worker(self, **kwargs) -> GraphWorker:
        return GraphWorker(
            reporter=self.reporter,
            path_resolver=self._path_resolver,
            registry=self._registry,
            session=self._session,
            max_concurrency=self.max_concurrency,
            **kwargs,
        )

    async def load_solution(
        self,
        solution_path: str,
        progress: ProgressSink | None = None,
        cancel: CancellationToken | None = None,
    ) -> SolutionSnapshot:
        """
        Load a solution file, every project it declares and every project
        those projects reference.

        Declared projects come first in the snapshot, in declaration order.
        """
        if solution_path is None:
            raise TypeError("solution_path must not be None")
        cancel = cancel or CancellationToken()

        absolute_path = self._path_resolver.resolve_solution_path(
            solution_path, os.getcwd(), DiagnosticReportingMode.THROW
        )
        if absolute_path is None:
            # A reporter that does not raise in Throw mode leaves nothing to load
            raise ProjloadError(f"Solution file could not be resolved: '{solution_path}'")

        properties = self._solution_properties(absolute_path)
        entries = self._solution_reader(absolute_path)
        cancel.raise_if_cancelled()

        declared = SolutionAssembler.declared_project_paths(entries)
        mode = self._unrecognized_project_mode()
        options = DiagnosticReportingOptions.uniform(mode)

        worker = self._create_worker(
            requested_paths=declared,
            base_directory=os.path.dirname(absolute_path),
            global_properties=properties,
            requested_options=options,
            discovered_options=options,
            progress=progress,
            prefer_metadata_for_referenced_projects=False,
        )
        projects = await worker.load(cancel)
        logger.info("Loaded %d project(s) from %s", len(projects), absolute_path)
        return SolutionAssembler.assemble(absolute_path, declared, projects)

    async def load_project(
        self,
        project_path: str,
        identity_map: ProjectIdentityMap | None = None,
        progress: ProgressSink | None = None,
        cancel: CancellationToken | None = None,
    ) -> list[ProjectDescription]:
        """
        Load a project file and every project it references.

        The first description corresponds to ``project_path``. Failures on
        ``project_path`` itself always raise.
        """
        if project_path is None:
            raise TypeError("project_path must not be None")

        with self._properties_guard:
            properties = self._properties

        worker = self._create_worker(
            requested_paths=[project_path],
            base_directory=os.getcwd(),
            global_properties=properties,
            requested_options=DiagnosticReportingOptions.throw_for_all(),
            discovered_options=DiagnosticReportingOptions.uniform(self._unrecognized_project_mode()),
            identity_map=identity_map,
            progress=progress,
            prefer_metadata_for_referenced_projects=self.load_metadata_for_referenced_projects,
        )
        projects = await worker.load(cancel)
        logger.info("Loaded %d project(s) from %s", len(projects), project_path)
        return projects

    def close(self) -> None:
        """Release the evaluation engine. Further loads fail."""
        self._session.close()

    def __enter__(self) -> ProjectLoader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    async def __aenter__(self) -> ProjectLoader:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()
