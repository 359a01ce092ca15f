"""
Global evaluation properties.

Property names are case-insensitive; the spelling of the first insertion is
kept for display. Instances are immutable: deriving solution-relative
properties returns a new mapping and never changes the original.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from pathlib import Path

SOLUTION_DIR_PROPERTY = "SolutionDir"


class GlobalProperties(Mapping[str, str]):
    """Immutable, case-insensitive mapping of property name to value."""

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, str] | None = None) -> None:
        folded: dict[str, tuple[str, str]] = {}
        for name, value in (items or {}).items():
            if not isinstance(value, str):
                raise TypeError(f"Property '{name}' must be a string, got {type(value).__name__}")
            key = name.casefold()
            display = folded[key][0] if key in folded else name
            folded[key] = (display, value)
        self._items = folded

    def __getitem__(self, name: str) -> str:
        return self._items[name.casefold()][1]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self._items

    def __iter__(self) -> Iterator[str]:
        return (display for display, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"GlobalProperties({self.to_dict()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return self.to_dict() == GlobalProperties(other).to_dict()

    def __hash__(self) -> int:
        return hash(frozenset((key, value) for key, (_, value) in self._items.items()))

    def to_dict(self) -> dict[str, str]:
        return {display: value for display, value in self._items.values()}

    def with_items(self, items: Mapping[str, str]) -> GlobalProperties:
        """Return a new mapping with ``items`` set (overriding existing names)."""
        merged = {key: (display, value) for key, (display, value) in self._items.items()}
        for name, value in items.items():
            key = name.casefold()
            merged.pop(key, None)
            merged[key] = (name, value)
        return GlobalProperties({display: value for display, value in merged.values()})

    def with_solution_dir(self, solution_path: str) -> GlobalProperties:
        """
        Return a new mapping with ``SolutionDir`` set for ``solution_path``.

        Projects built on their own don't get ``SolutionDir``; projects built
        from a solution see the solution's directory, with a trailing
        separator. The property is only set when that directory exists.
        """
        solution_dir = os.path.dirname(solution_path)
        if not solution_dir or not Path(solution_dir).is_dir():
            return self
        if not solution_dir.endswith(os.sep):
            solution_dir += os.sep
        return self.with_items({SOLUTION_DIR_PROPERTY: solution_dir})
