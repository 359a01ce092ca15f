"""Tests for GraphWorker used directly, with explicit reporting options."""

from __future__ import annotations

import pytest

from projload.core.diagnostics import DiagnosticReporter
from projload.core.engine import EvaluationEngineSession
from projload.core.errors import ProjectFileNotFoundError
from projload.core.ir import DiagnosticReportingMode, DiagnosticReportingOptions
from projload.core.paths import PathResolver
from projload.core.properties import GlobalProperties
from projload.core.registry import LoaderRegistry
from projload.core.worker import GraphWorker

LOG = DiagnosticReportingOptions.log_for_all()
THROW = DiagnosticReportingOptions.throw_for_all()


@pytest.fixture
def make_worker(engine, tree):
    reporter = DiagnosticReporter()
    registry = LoaderRegistry()
    registry.associate_extension("proj", "Test")
    sessions = []

    def _make(requested, requested_options=THROW, discovered_options=LOG, **kwargs) -> GraphWorker:
        session = EvaluationEngineSession(lambda: engine)
        sessions.append(session)
        worker = GraphWorker(
            reporter=reporter,
            path_resolver=PathResolver(reporter),
            registry=registry,
            session=session,
            requested_paths=requested,
            base_directory=str(tree.root),
            global_properties=GlobalProperties(),
            requested_options=requested_options,
            discovered_options=discovered_options,
            **kwargs,
        )
        worker.reporter = reporter
        return worker

    yield _make

    for session in sessions:
        session.close()


class TestGraphWorker:
    @pytest.mark.asyncio
    async def test_requested_order_is_preserved(self, tree, make_worker):
        tree.add("A.proj", references=["C.proj"])
        tree.add("B.proj", references=["A.proj"])
        tree.add("C.proj")

        projects = await make_worker(["B.proj", "A.proj"]).load()

        assert [p.name for p in projects] == ["B", "A", "C"]

    @pytest.mark.asyncio
    async def test_requested_project_also_referenced_stays_requested(self, tree, make_worker):
        tree.add("A.proj", references=["B.proj"])
        tree.add("B.proj")

        projects = await make_worker(["A.proj", "B.proj"], max_concurrency=1).load()

        assert [p.name for p in projects] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_duplicate_requested_paths_collapse_silently(self, tree, make_worker):
        tree.add("A.proj")

        worker = make_worker(["A.proj", "./A.proj", "a.PROJ"])
        projects = await worker.load()

        assert [p.name for p in projects] == ["A"]
        assert len(worker.reporter.log) == 0

    @pytest.mark.asyncio
    async def test_discovered_policy_applies_at_any_depth(self, tree, make_worker):
        tree.add("A.proj", references=["B.proj"])
        tree.add("B.proj", references=["C.proj"])
        tree.add("C.proj", references=["Missing.proj"])

        worker = make_worker(["A.proj"])
        projects = await worker.load()

        assert [p.name for p in projects] == ["A", "B", "C"]
        assert len(worker.reporter.log) == 1

    @pytest.mark.asyncio
    async def test_throw_for_discovered_aborts(self, tree, make_worker):
        tree.add("A.proj", references=["B.proj", "Missing.proj"])
        tree.add("B.proj")

        with pytest.raises(ProjectFileNotFoundError):
            await make_worker(["A.proj"], discovered_options=THROW).load()

    @pytest.mark.asyncio
    async def test_ignore_mode_drops_silently(self, tree, make_worker):
        tree.add("A.proj", references=["Missing.proj"])
        ignore = DiagnosticReportingOptions.uniform(DiagnosticReportingMode.IGNORE)

        worker = make_worker(["A.proj"], discovered_options=ignore)
        projects = await worker.load()

        assert [p.name for p in projects] == ["A"]
        assert len(worker.reporter.log) == 0

    @pytest.mark.asyncio
    async def test_no_requested_paths(self, make_worker):
        assert await make_worker([]).load() == []

    @pytest.mark.asyncio
    async def test_worker_is_single_use(self, tree, make_worker):
        tree.add("A.proj")
        worker = make_worker(["A.proj"])
        await worker.load()

        with pytest.raises(RuntimeError):
            await worker.load()
