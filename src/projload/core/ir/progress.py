"""
Progress types reported while a project graph is loading.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ProjectLoadOperation(StrEnum):
    """Last operation performed on a worklist item."""

    RESOLVE = "resolve"
    EVALUATE = "evaluate"
    METADATA = "metadata"


class ProjectLoadOutcome(StrEnum):
    """How a worklist item ended."""

    LOADED = "loaded"
    METADATA_ONLY = "metadata_only"
    SKIPPED = "skipped"
    FAILED = "failed"


class ProjectLoadProgress(BaseModel):
    """
    One unit of completed work.

    Attributes:
        file_path: Project path as resolved, or as given when resolution failed
        operation: Last operation performed on the item
        outcome: How the item ended
        elapsed: Seconds spent on the item
        completed: Number of worklist items completed so far in this load
    """

    file_path: str
    operation: ProjectLoadOperation
    outcome: ProjectLoadOutcome
    elapsed: float
    completed: int

    model_config = ConfigDict(frozen=True)
