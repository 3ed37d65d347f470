"""Root finder — map a changed file to the service directory that owns it.

A service directory is one containing the *root marker* file (``go.mod`` by
default).  The search is purely upward: it never descends into siblings, and
a directory missing from the tree counts as "no marker here" because a diff
legitimately references directories that were deleted wholesale.
"""

from __future__ import annotations

import logging
import posixpath

from service_builder.domain.exceptions import DirectoryNotFoundError, RootNotFoundError
from service_builder.domain.ports.filesystem import FileSystem

logger = logging.getLogger(__name__)

_REPO_ROOT = "."


def _parent(dir_path: str) -> str:
    return posixpath.dirname(dir_path) or _REPO_ROOT


class RootFinder:
    """Locates marker-owning directories through a :class:`FileSystem`."""

    def __init__(self, filesystem: FileSystem, marker: str = "go.mod") -> None:
        self._fs = filesystem
        self._marker = marker

    @property
    def marker(self) -> str:
        return self._marker

    def is_marker(self, file_path: str) -> bool:
        return posixpath.basename(file_path) == self._marker

    def find_owning_directory(self, file_path: str) -> str:
        """Return the nearest ancestor directory of *file_path* owning the marker.

        Raises :class:`RootNotFoundError` when no ancestor below the
        repository root has one.
        """
        directory, name = posixpath.split(file_path.strip("/"))
        directory = directory.rstrip("/")
        if name == self._marker and directory:
            return directory

        while directory and directory != _REPO_ROOT:
            if self._has_marker(directory):
                return directory
            directory = _parent(directory)

        raise RootNotFoundError(f"No parent {self._marker} found for {file_path}")

    def find_all_roots(self, start: str = _REPO_ROOT) -> list[str]:
        """Return every directory under *start* that contains the marker.

        The repository root itself is never reported, and dot-prefixed
        directories such as ``.git`` are not descended into.
        """
        roots: list[str] = []
        for entry in self._fs.list_entries(start):
            if entry.is_directory:
                if entry.name.startswith("."):
                    continue
                child = entry.name if start == _REPO_ROOT else f"{start}/{entry.name}"
                roots.extend(self.find_all_roots(child))
            elif entry.name == self._marker and start != _REPO_ROOT:
                roots.append(start)
        return roots

    def _has_marker(self, directory: str) -> bool:
        try:
            entries = self._fs.list_entries(directory)
        except DirectoryNotFoundError:
            logger.debug("Directory %s is gone, treating as marker absent", directory)
            return False
        return any(entry.name == self._marker for entry in entries)
