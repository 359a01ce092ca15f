"""Combine a solution's loaded projects into a SolutionSnapshot."""

from __future__ import annotations

import os
from collections.abc import Sequence

from .ir import (
    ProjectDescription,
    SolutionEntry,
    SolutionEntryKind,
    SolutionIdentity,
    SolutionSnapshot,
)
from .paths import PathResolver, canonical_key


class SolutionAssembler:
    @staticmethod
    def declared_project_paths(entries: Sequence[SolutionEntry]) -> list[str]:
        """Project paths in declaration order, solution folders excluded."""
        return [entry.path for entry in entries if entry.kind != SolutionEntryKind.FOLDER]

    @staticmethod
    def assemble(
        solution_path: str,
        declared_project_paths: Sequence[str],
        projects: Sequence[ProjectDescription],
    ) -> SolutionSnapshot:
        """
        Build the snapshot.

        Declared projects that were loaded come first, in declaration order
        (relative paths are taken against the solution's directory). The
        remaining projects follow in the order given. Declared projects that
        failed to load are simply absent.
        """
        solution_dir = os.path.dirname(solution_path)
        by_key = {canonical_key(p.file_path): p for p in projects}

        ordered: list[ProjectDescription] = []
        placed: set[str] = set()
        for declared in declared_project_paths:
            absolute = PathResolver.get_absolute_path(declared, solution_dir)
            if absolute is None:
                continue
            key = canonical_key(absolute)
            if key in by_key and key not in placed:
                ordered.append(by_key[key])
                placed.add(key)

        ordered.extend(p for p in projects if canonical_key(p.file_path) not in placed)

        return SolutionSnapshot(
            identity=SolutionIdentity.create_new(debug_name=solution_path),
            file_path=solution_path,
            projects=tuple(ordered),
        )
