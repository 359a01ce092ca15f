"""
Solution types for projload IR.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from .identity import SolutionIdentity
from .project import ProjectDescription


class SolutionEntryKind(StrEnum):
    """Kind of entry declared in a solution file."""

    PROJECT = "project"
    FOLDER = "folder"


class SolutionEntry(BaseModel):
    """
    One entry declared in a solution file, in declaration order.

    Attributes:
        name: Entry name as declared
        path: Path relative to the solution directory (folders repeat the name)
        kind: Project or solution folder
    """

    name: str
    path: str
    kind: SolutionEntryKind = SolutionEntryKind.PROJECT

    model_config = ConfigDict(frozen=True)


class SolutionSnapshot(BaseModel):
    """
    Immutable snapshot of a loaded solution.

    Attributes:
        identity: Identity of the solution
        file_path: Absolute solution file path
        projects: Loaded projects; declared projects first, in declaration
            order, followed by transitively discovered projects
    """

    identity: SolutionIdentity
    file_path: str
    projects: tuple[ProjectDescription, ...] = ()

    model_config = ConfigDict(frozen=True)

    def project_by_path(self, path: str) -> ProjectDescription | None:
        folded = path.casefold()
        for project in self.projects:
            if project.file_path.casefold() == folded:
                return project
        return None
