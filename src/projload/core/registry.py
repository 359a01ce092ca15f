"""
Project file loader registry.

Maps a project file extension to a language, and a language to a loader
that asks the evaluation engine for a structured description of the file.

Associations are owned by one loader instance and must be made before any
load that needs them. They are not synchronized: changing them while a load
is in flight is a caller error.
"""

from __future__ import annotations

import logging
import os

from .cancellation import CancellationToken
from .engine import EvaluationEngineSession
from .ir import EvaluationResult
from .properties import GlobalProperties

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: dict[str, str] = {
    "csproj": "C#",
    "vbproj": "Visual Basic",
    "fsproj": "F#",
}


def normalize_extension(extension: str) -> str:
    return extension.lstrip(".").casefold()


class ProjectFileLoader:
    """Evaluation capability for the project files of one language."""

    def __init__(self, language: str) -> None:
        self.language = language

    async def load(
        self,
        session: EvaluationEngineSession,
        path: str,
        properties: GlobalProperties,
        cancel: CancellationToken,
    ) -> EvaluationResult:
        return await session.evaluate(path, properties, cancel)

    async def get_output_path(
        self,
        session: EvaluationEngineSession,
        path: str,
        properties: GlobalProperties,
        cancel: CancellationToken,
    ) -> str | None:
        return await session.get_output_path(path, properties, cancel)

    def __repr__(self) -> str:
        return f"ProjectFileLoader({self.language!r})"


class LoaderRegistry:
    """Extension → language → loader lookup."""

    def __init__(self, extensions: dict[str, str] | None = None) -> None:
        self._languages: dict[str, str] = {}
        self._loaders: dict[str, ProjectFileLoader] = {}
        for extension, language in (DEFAULT_EXTENSIONS if extensions is None else extensions).items():
            self.associate_extension(extension, language)

    def associate_extension(self, extension: str, language: str) -> None:
        """Associate a project file extension with a language (case-insensitive)."""
        if extension is None:
            raise TypeError("extension must not be None")
        if language is None:
            raise TypeError("language must not be None")
        if not normalize_extension(extension):
            raise ValueError("extension must not be empty")

        self._languages[normalize_extension(extension)] = language
        if language not in self._loaders:
            self._loaders[language] = ProjectFileLoader(language)
        logger.debug("Associated .%s with %s", normalize_extension(extension), language)

    def register_loader(self, loader: ProjectFileLoader) -> None:
        """Install a custom loader for its language."""
        self._loaders[loader.language] = loader

    def language_for(self, path: str) -> str | None:
        extension = os.path.splitext(path)[1]
        if not extension:
            return None
        return self._languages.get(normalize_extension(extension))

    def loader_for(self, path: str) -> ProjectFileLoader | None:
        """Return the loader for ``path``'s extension, or None if unsupported."""
        language = self.language_for(path)
        if language is None:
            return None
        return self._loaders.get(language)

    @property
    def extensions(self) -> dict[str, str]:
        return dict(self._languages)
