"""Filesystem adapters — implement the FileSystem port.

``LocalFileSystem`` reads the checked-out working tree; ``MemoryFileSystem``
is a deterministic in-memory tree built from a list of file paths.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable
from pathlib import Path

from service_builder.domain.entities import DirectoryEntry
from service_builder.domain.exceptions import DirectoryNotFoundError


def _normalise(dir_path: str) -> str:
    """Return a clean relative POSIX path; the tree root is ``"."``."""
    return posixpath.normpath(dir_path.strip("/"))


class LocalFileSystem:
    """Concrete FileSystem backed by a directory on disk."""

    def __init__(self, root: Path | str = ".") -> None:
        self._root = Path(root)

    def list_entries(self, dir_path: str) -> list[DirectoryEntry]:
        """List *dir_path* relative to the root, sorted by name.

        Symlinked directories are reported as plain entries so a recursive
        walk never leaves the tree or loops.
        """
        target = self._root / _normalise(dir_path)
        try:
            children = sorted(target.iterdir(), key=lambda p: p.name)
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise DirectoryNotFoundError(f"Directory not found: {dir_path}") from exc
        return [
            DirectoryEntry(name=p.name, is_directory=p.is_dir() and not p.is_symlink())
            for p in children
        ]


class MemoryFileSystem:
    """Concrete FileSystem holding an in-memory tree.

    Directories are implied by the file paths, e.g. ``["a/b/go.mod"]``
    creates ``a`` and ``a/b``.  Empty directories can be given with a
    trailing slash (``"a/empty/"``).
    """

    def __init__(self, files: Iterable[str] = ()) -> None:
        self._dirs: dict[str, dict[str, bool]] = {".": {}}
        for path in files:
            self.add(path)

    def add(self, path: str) -> None:
        """Register a file (or, with a trailing slash, a directory)."""
        is_dir = path.endswith("/")
        parts = _normalise(path).split("/")
        parent = "."
        for depth, name in enumerate(parts):
            last = depth == len(parts) - 1
            entry_is_dir = is_dir or not last
            self._dirs[parent][name] = self._dirs[parent].get(name, False) or entry_is_dir
            if entry_is_dir:
                parent = name if parent == "." else f"{parent}/{name}"
                self._dirs.setdefault(parent, {})

    def remove(self, path: str) -> None:
        """Forget a single file.  Parent directories are kept."""
        parent, name = posixpath.split(_normalise(path))
        self._dirs.get(parent or ".", {}).pop(name, None)

    def list_entries(self, dir_path: str) -> list[DirectoryEntry]:
        key = _normalise(dir_path)
        if key not in self._dirs:
            raise DirectoryNotFoundError(f"Directory not found: {dir_path}")
        return [
            DirectoryEntry(name=name, is_directory=is_dir)
            for name, is_dir in sorted(self._dirs[key].items())
        ]
