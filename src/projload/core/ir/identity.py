"""
Identity types for loaded projects and solutions.

An identity is a process-unique handle that distinguishes one loaded project
from another independently of its path string. The debug name carries the
original path for display only and plays no part in equality.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field


class ProjectIdentity(BaseModel):
    """
    Process-unique identity of a loaded project.

    Attributes:
        id: Unique identifier
        debug_name: Human-readable label, usually the project path
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    debug_name: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def create_new(cls, debug_name: str | None = None) -> ProjectIdentity:
        return cls(debug_name=debug_name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"{self.id} ({self.debug_name})" if self.debug_name else str(self.id)


class SolutionIdentity(BaseModel):
    """Process-unique identity of a loaded solution."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    debug_name: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def create_new(cls, debug_name: str | None = None) -> SolutionIdentity:
        return cls(debug_name=debug_name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
