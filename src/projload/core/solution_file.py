"""Read .sln files (custom text format, not XML)."""

from __future__ import annotations

import re
from pathlib import Path

from .errors import ErrorContext, SolutionFileError
from .ir import SolutionEntry, SolutionEntryKind

# Project("{TYPE-GUID}") = "Name", "Path\To\Project.csproj", "{PROJECT-GUID}"
_PROJECT_RE = re.compile(
    r'^\s*Project\(\"\{([^}]+)\}\"\)\s*=\s*\"([^\"]*)\"\s*,\s*\"([^\"]*)\"\s*,\s*\"\{([^}]+)\}\"',
    re.MULTILINE,
)

SOLUTION_FOLDER_GUID = "2150E333-8FDC-42A3-9474-1A3956D46DE8"


def read_solution_file(path: str) -> list[SolutionEntry]:
    """
    Read the entries of a solution file in declaration order.

    Solution folders are returned with kind FOLDER; callers filter them.
    """
    try:
        content = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise SolutionFileError(
            f"Unable to read solution file: {exc}", ErrorContext(path=path, code="solution_file")
        ) from exc

    if "Microsoft Visual Studio Solution File" not in content:
        raise SolutionFileError(
            "Not a solution file (missing format header)",
            ErrorContext(path=path, code="solution_file"),
        )

    entries = []
    for match in _PROJECT_RE.finditer(content):
        type_guid = match.group(1).upper()
        kind = SolutionEntryKind.FOLDER if type_guid == SOLUTION_FOLDER_GUID else SolutionEntryKind.PROJECT
        entries.append(SolutionEntry(name=match.group(2), path=match.group(3), kind=kind))
    return entries
