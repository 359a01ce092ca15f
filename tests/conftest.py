"""Shared pytest fixtures for projload tests."""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest

from projload.core.errors import EvaluationFailure
from projload.core.ir import EvaluationResult
from projload.core.loader import ProjectLoader

SLN_HEADER = """\
Microsoft Visual Studio Solution File, Format Version 12.00
# Visual Studio Version 17
"""

PROJECT_TYPE_GUID = "FAE04EC0-301F-11D3-BF4B-00C04F79EFBC"
FOLDER_TYPE_GUID = "2150E333-8FDC-42A3-9474-1A3956D46DE8"


class FakeEngine:
    """In-memory evaluation engine keyed by absolute project path."""

    def __init__(self) -> None:
        self.results: dict[str, EvaluationResult | EvaluationFailure] = {}
        self.calls: list[str] = []
        self.output_queries: list[str] = []
        self.properties_seen: list[dict[str, str]] = []
        self.delay = 0.0
        self.closed = 0
        self.max_active = 0
        self._active = 0
        self._lock = threading.Lock()

    def _enter(self) -> None:
        with self._lock:
            self._active += 1
            self.max_active = max(self.max_active, self._active)

    def _exit(self) -> None:
        with self._lock:
            self._active -= 1

    def evaluate(self, path: str, properties: Mapping[str, str]) -> EvaluationResult:
        self._enter()
        try:
            if self.delay:
                time.sleep(self.delay)
            self.calls.append(path)
            self.properties_seen.append(dict(properties))
            result = self.results[path]
            if isinstance(result, EvaluationFailure):
                raise result
            return result
        finally:
            self._exit()

    def get_output_path(self, path: str, properties: Mapping[str, str]) -> str | None:
        self.output_queries.append(path)
        result = self.results[path]
        if isinstance(result, EvaluationFailure):
            raise result
        return result.output_path

    def close(self) -> None:
        self.closed += 1


class ProjectTree:
    """Creates project files under a temporary root and registers their evaluation results."""

    def __init__(self, root: Path, engine: FakeEngine) -> None:
        self.root = root
        self.engine = engine

    def path(self, rel: str) -> str:
        return os.path.normpath(str(self.root / rel))

    def add(
        self,
        rel: str,
        references: Sequence[str] = (),
        documents: Sequence[str] = ("Program.cs",),
        fail: str | None = None,
    ) -> str:
        """Create ``rel`` and register its result. References are relative to the project."""
        file_path = self.root / rel
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text("<Project />\n")
        key = self.path(rel)
        if fail is not None:
            self.engine.results[key] = EvaluationFailure(key, fail)
        else:
            self.engine.results[key] = EvaluationResult(
                name=file_path.stem,
                documents=tuple(documents),
                project_references=tuple(references),
                output_path=str(file_path.parent / "bin" / f"{file_path.stem}.dll"),
            )
        return key

    def build_output(self, rel: str) -> str:
        """Create the prebuilt output artifact of a registered project."""
        result = self.engine.results[self.path(rel)]
        assert isinstance(result, EvaluationResult) and result.output_path
        Path(result.output_path).parent.mkdir(parents=True, exist_ok=True)
        Path(result.output_path).write_bytes(b"MZ")
        return result.output_path

    def solution(self, rel: str, projects: Sequence[str], folders: Sequence[str] = ()) -> str:
        lines = [SLN_HEADER]
        for i, folder in enumerate(folders):
            lines.append(
                f'Project("{{{FOLDER_TYPE_GUID}}}") = "{folder}", "{folder}", '
                f'"{{00000000-0000-0000-0000-{i:012d}}}"\nEndProject\n'
            )
        for i, project in enumerate(projects):
            name = Path(project.replace("\\", "/")).stem
            lines.append(
                f'Project("{{{PROJECT_TYPE_GUID}}}") = "{name}", "{project}", '
                f'"{{11111111-0000-0000-0000-{i:012d}}}"\nEndProject\n'
            )
        lines.append("Global\nEndGlobal\n")
        file_path = self.root / rel
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text("".join(lines))
        return self.path(rel)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def tree(tmp_path: Path, engine: FakeEngine) -> ProjectTree:
    return ProjectTree(tmp_path, engine)


@pytest.fixture
def make_loader(engine: FakeEngine):
    """Factory for loaders backed by the fake engine, with ``.proj`` associated."""
    created: list[ProjectLoader] = []

    def _make(**kwargs) -> ProjectLoader:
        loader = ProjectLoader(engine_factory=lambda: engine, **kwargs)
        loader.associate_extension(".proj", "Test")
        created.append(loader)
        return loader

    yield _make

    for loader in created:
        loader.close()


@pytest.fixture
def loader(make_loader) -> ProjectLoader:
    return make_loader()
