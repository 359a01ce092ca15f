"""
Project description types for projload IR.

A ProjectDescription is produced once per unique project path per load and
never mutated afterwards. References between projects are stored as
identities rather than structural links, so cyclic project graphs cannot
produce cyclic object graphs.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .identity import ProjectIdentity


class ProjectDescription(BaseModel):
    """
    Loaded description of a single project file.

    Attributes:
        identity: Identity assigned to this project in this load
        name: Display name
        language: Language associated with the project file extension
        file_path: Absolute, canonical project file path
        output_path: Path of the build output artifact, if known
        documents: Absolute source document paths
        project_references: Identities of referenced projects present in the load
        metadata_references: External (binary/package) references
        compilation_options: Effective compiler-related properties
        global_properties: Global properties the project was evaluated with
        is_metadata_only: True when the description was synthesized from a
            prebuilt output artifact instead of full evaluation
    """

    identity: ProjectIdentity
    name: str
    language: str
    file_path: str
    output_path: str | None = None
    documents: tuple[str, ...] = ()
    project_references: tuple[ProjectIdentity, ...] = ()
    metadata_references: tuple[str, ...] = ()
    compilation_options: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    global_properties: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    is_metadata_only: bool = False

    model_config = ConfigDict(frozen=True)

    @field_validator("compilation_options", "global_properties")
    @classmethod
    def freeze_mappings(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        """Property maps are stored read-only."""
        return MappingProxyType(dict(v))

    @field_serializer("compilation_options", "global_properties")
    def serialize_mappings(self, v: Mapping[str, str]) -> dict[str, str]:
        return dict(v)

    def same_content(self, other: ProjectDescription) -> bool:
        """Compare everything except identities (own and referenced)."""
        ignore = {"identity", "project_references"}
        return (
            self.model_dump(exclude=ignore) == other.model_dump(exclude=ignore)
            and len(self.project_references) == len(other.project_references)
        )
