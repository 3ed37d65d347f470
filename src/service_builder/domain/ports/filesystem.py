"""Port: filesystem queries — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from service_builder.domain.entities import DirectoryEntry


class FileSystem(Protocol):
    """Read-only view of the checked-out working tree."""

    def list_entries(self, dir_path: str) -> list[DirectoryEntry]:
        """Return the entries of *dir_path* (relative to the tree root).

        Raises :class:`DirectoryNotFoundError` when the directory is missing.
        """
        ...
