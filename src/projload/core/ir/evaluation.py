"""
Raw evaluation output produced by an evaluation engine for one project file.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class EvaluationResult(BaseModel):
    """
    What the evaluation engine reports for a single project file.

    Paths in ``documents`` and ``project_references`` may be relative; they
    are interpreted relative to the project file's directory.

    Attributes:
        name: Display name (assembly name or file stem)
        documents: Source document paths
        project_references: Paths of referenced project files
        metadata_references: External (binary/package) references
        output_path: Path of the build output artifact
        compilation_options: Effective compiler-related properties
        diagnostics: Non-fatal messages produced during evaluation
    """

    name: str
    documents: tuple[str, ...] = ()
    project_references: tuple[str, ...] = ()
    metadata_references: tuple[str, ...] = ()
    output_path: str | None = None
    compilation_options: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    diagnostics: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @field_validator("compilation_options")
    @classmethod
    def freeze_options(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    @field_serializer("compilation_options")
    def serialize_options(self, v: Mapping[str, str]) -> dict[str, str]:
        return dict(v)
