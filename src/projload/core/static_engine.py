"""
Static evaluation engine for MSBuild-style XML project files.

Reads properties and items without running build logic: conditions are not
evaluated and imports are not followed. Good enough for SDK-style and
simple legacy project files, and for tests.
"""

from __future__ import annotations

import glob
import logging
import os
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator, Mapping
from pathlib import Path

from .errors import EvaluationFailure
from .ir import EvaluationResult
from .properties import GlobalProperties

logger = logging.getLogger(__name__)

_PROPERTY_REF = re.compile(r"\$\(([A-Za-z_][\w.\-]*)\)")

# Project file extension -> source file extension used for SDK-style default globs
_SOURCE_EXTENSIONS: dict[str, str] = {
    ".csproj": ".cs",
    ".vbproj": ".vb",
    ".fsproj": ".fs",
}

_EXCLUDED_DIRS = {"bin", "obj"}

_COMPILATION_PROPERTIES = (
    "Configuration",
    "Platform",
    "TargetFramework",
    "OutputType",
    "LangVersion",
    "Nullable",
    "DefineConstants",
    "AllowUnsafeBlocks",
)


class StaticProjectEngine:
    """Evaluation engine that reads project XML directly."""

    def evaluate(self, path: str, properties: Mapping[str, str]) -> EvaluationResult:
        root = _parse(path)
        project_dir = os.path.dirname(path)
        props, warnings = _evaluate_properties(root, path, properties)

        documents: list[str] = []
        project_refs: list[str] = []
        metadata_refs: list[str] = []

        for item_type, include in _items(root, props, warnings):
            if item_type == "Compile":
                documents.extend(_expand_include(project_dir, include))
            elif item_type == "ProjectReference":
                project_refs.append(include)
            elif item_type in ("Reference", "PackageReference"):
                metadata_refs.append(include)

        if not documents and root.get("Sdk"):
            documents = _default_documents(path)

        options = {name: props[name] for name in _COMPILATION_PROPERTIES if props.get(name)}

        return EvaluationResult(
            name=props.get("AssemblyName") or Path(path).stem,
            documents=tuple(documents),
            project_references=tuple(project_refs),
            metadata_references=tuple(metadata_refs),
            output_path=_output_path(path, props),
            compilation_options=options,
            diagnostics=tuple(warnings),
        )

    def get_output_path(self, path: str, properties: Mapping[str, str]) -> str | None:
        root = _parse(path)
        props, _ = _evaluate_properties(root, path, properties)
        return _output_path(path, props)

    def close(self) -> None:
        pass


def _parse(path: str) -> ET.Element:
    try:
        return ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise EvaluationFailure(path, f"Failed to evaluate project file '{path}': {exc}") from exc


def _local(tag: str) -> str:
    """Strip the XML namespace used by legacy project files."""
    return tag.rsplit("}", 1)[-1]


def _expand(value: str, props: GlobalProperties, warnings: list[str], path: str) -> str:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in props:
            return props[name]
        warnings.append(f"Property '$({name})' is not defined in '{path}'")
        return ""

    return _PROPERTY_REF.sub(replace, value)


def _evaluate_properties(
    root: ET.Element, path: str, global_properties: Mapping[str, str]
) -> tuple[GlobalProperties, list[str]]:
    """
    Evaluate PropertyGroup elements in document order.

    Global properties win over project-defined ones. Reserved properties
    describing the project file are always available.
    """
    warnings: list[str] = []
    stem = Path(path).stem
    props = GlobalProperties(
        {
            "MSBuildProjectFullPath": path,
            "MSBuildProjectDirectory": os.path.dirname(path),
            "MSBuildProjectFile": os.path.basename(path),
            "MSBuildProjectName": stem,
            "MSBuildProjectExtension": os.path.splitext(path)[1],
        }
    ).with_items(dict(global_properties))
    globals_ = GlobalProperties(dict(global_properties))

    for group in root:
        if _local(group.tag) != "PropertyGroup":
            continue
        for element in group:
            name = _local(element.tag)
            if name in globals_:
                continue
            value = _expand((element.text or "").strip(), props, warnings, path)
            props = props.with_items({name: value})

    return props, warnings


def _items(
    root: ET.Element, props: GlobalProperties, warnings: list[str]
) -> Iterator[tuple[str, str]]:
    path = props["MSBuildProjectFullPath"]
    for group in root:
        if _local(group.tag) != "ItemGroup":
            continue
        for element in group:
            include = element.get("Include")
            if not include:
                continue
            for part in _expand(include, props, warnings, path).split(";"):
                if part.strip():
                    yield _local(element.tag), part.strip()


def _normalize(project_dir: str, include: str) -> str:
    if os.sep == "/":
        include = include.replace("\\", "/")
    return os.path.normpath(os.path.join(project_dir, include))


def _expand_include(project_dir: str, include: str) -> list[str]:
    full = _normalize(project_dir, include)
    if not glob.has_magic(full):
        return [full]
    return sorted(os.path.normpath(p) for p in glob.glob(full, recursive=True) if os.path.isfile(p))


def _default_documents(path: str) -> list[str]:
    source_ext = _SOURCE_EXTENSIONS.get(os.path.splitext(path)[1].casefold())
    if source_ext is None:
        return []

    project_dir = Path(path).parent
    documents = []
    for candidate in project_dir.rglob(f"*{source_ext}"):
        relative = candidate.relative_to(project_dir)
        if any(part.casefold() in _EXCLUDED_DIRS for part in relative.parts[:-1]):
            continue
        if candidate.is_file():
            documents.append(str(candidate))
    return sorted(documents)


def _output_path(path: str, props: GlobalProperties) -> str:
    configuration = props.get("Configuration") or "Debug"
    output_dir = props.get("OutputPath") or os.path.join("bin", configuration)
    assembly_name = props.get("AssemblyName") or Path(path).stem
    output_type = (props.get("OutputType") or "Library").casefold()
    suffix = ".exe" if output_type in ("exe", "winexe") else ".dll"
    return os.path.join(_normalize(os.path.dirname(path), output_dir), assembly_name + suffix)
