"""Change classifier — turn a commit diff into per-directory lifecycle statuses.

Every changed file is attributed to the service directory that owns it (see
:mod:`service_builder.services.root_finder`).  Adding or removing the root
marker itself creates or deletes the service; any other change is an update.
Each directory is reported once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from service_builder.domain.entities import (
    ChangeEntry,
    ChangeKind,
    ClassificationResult,
    DirectoryStatus,
)
from service_builder.domain.exceptions import InvalidChangeError, RootNotFoundError
from service_builder.domain.ports.commit_source import CommitSource
from service_builder.services.root_finder import RootFinder

logger = logging.getLogger(__name__)


def _is_dotted(path: str) -> bool:
    """True for paths under a dot-prefixed top-level segment, e.g. ``.github/``."""
    return path.startswith(".")


def split_renames(entries: Iterable[ChangeEntry]) -> list[ChangeEntry]:
    """Replace each rename by a removal of the old path and an addition of the new one.

    Paths under dotted top-level directories are dropped on both sides.
    """
    result: list[ChangeEntry] = []
    for entry in entries:
        if entry.kind is ChangeKind.RENAMED:
            previous = entry.previous_path
            if previous is None:
                raise InvalidChangeError(f"Rename of {entry.path} has no previous path")
            if not _is_dotted(previous):
                result.append(ChangeEntry(previous, ChangeKind.REMOVED))
            entry = ChangeEntry(entry.path, ChangeKind.ADDED)
        if _is_dotted(entry.path):
            continue
        result.append(entry)
    return result


class ChangeClassifier:
    """Maps a commit's file changes onto service directories.

    Parameters
    ----------
    commit_source:
        Adapter returning the file-level diff of a commit.
    root_finder:
        Locates the service directory owning a path.
    rebuild_trigger:
        Dotted path whose *addition* forces every service to be rebuilt.
    """

    def __init__(
        self,
        commit_source: CommitSource,
        root_finder: RootFinder,
        rebuild_trigger: str = ".github/workflows/deploy.yaml",
    ) -> None:
        self._source = commit_source
        self._finder = root_finder
        self._trigger = rebuild_trigger

    async def classify(self, commit_sha: str) -> ClassificationResult:
        """Fetch the diff of *commit_sha* and classify it.

        A :class:`DiffFetchError` from the source propagates and aborts the run.
        """
        entries = await self._source.fetch_changes(commit_sha)
        return self.classify_entries(entries)

    def classify_entries(self, entries: Iterable[ChangeEntry]) -> ClassificationResult:
        """Classify an already fetched list of changes."""
        entries = list(entries)
        if self._is_rebuild_triggered(entries):
            logger.info("%s was added, rebuilding every service", self._trigger)
            return self.all_directories()
        return self.directory_statuses(split_renames(entries))

    def all_directories(self) -> ClassificationResult:
        """Every marker directory of the current tree, as newly created."""
        return {d: DirectoryStatus.CREATED for d in self._finder.find_all_roots()}

    def directory_statuses(self, entries: Iterable[ChangeEntry]) -> ClassificationResult:
        """Core mapping of (already normalised) entries to directory statuses.

        Marker additions and removals set ``CREATED`` / ``DELETED``, the last
        such event for a directory winning.  Other changes only record
        ``UPDATED`` when nothing is recorded yet, so they never downgrade.
        """
        dirs: ClassificationResult = {}
        for entry in entries:
            try:
                directory = self._finder.find_owning_directory(entry.path)
            except RootNotFoundError:
                # the owning service no longer exists on disk
                logger.debug("No service owns %s, skipping", entry.path)
                continue

            if self._finder.is_marker(entry.path):
                if entry.kind is ChangeKind.ADDED:
                    dirs[directory] = DirectoryStatus.CREATED
                elif entry.kind is ChangeKind.REMOVED:
                    dirs[directory] = DirectoryStatus.DELETED

            dirs.setdefault(directory, DirectoryStatus.UPDATED)
        return dirs

    def _is_rebuild_triggered(self, entries: list[ChangeEntry]) -> bool:
        return any(e.path == self._trigger and e.kind is ChangeKind.ADDED for e in entries)
