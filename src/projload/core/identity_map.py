"""
Project identity map.

Maps a canonical project path (case-insensitive) plus an optional build
configuration qualifier (exact match) to the identity assigned to it. The
same map can be handed to successive loads so reloaded projects keep their
identities.
"""

from __future__ import annotations

import threading

from .ir import ProjectIdentity
from .paths import canonical_key


class ProjectIdentityMap:
    """Thread-safe path → identity map with atomic get-or-create."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._identities: dict[tuple[str, str | None], ProjectIdentity] = {}

    @staticmethod
    def _key(path: str, configuration: str | None) -> tuple[str, str | None]:
        return canonical_key(path), configuration

    def add(self, path: str, identity: ProjectIdentity, configuration: str | None = None) -> None:
        """Seed the map. An existing entry for the same key is replaced."""
        with self._lock:
            self._identities[self._key(path, configuration)] = identity

    def try_get(self, path: str, configuration: str | None = None) -> ProjectIdentity | None:
        with self._lock:
            return self._identities.get(self._key(path, configuration))

    def get_or_create(self, path: str, configuration: str | None = None) -> ProjectIdentity:
        """Return the identity for ``path``, creating it if absent. First writer wins."""
        key = self._key(path, configuration)
        with self._lock:
            identity = self._identities.get(key)
            if identity is None:
                identity = ProjectIdentity.create_new(debug_name=path)
                self._identities[key] = identity
            return identity

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        folded = canonical_key(path)
        with self._lock:
            return any(key[0] == folded for key in self._identities)

    def __len__(self) -> int:
        with self._lock:
            return len(self._identities)
