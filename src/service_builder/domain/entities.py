"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from enum import Enum

from service_builder.domain.exceptions import InvalidChangeError


class ChangeKind(str, Enum):
    """Kind of a single file-level change in a commit."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"

    @classmethod
    def from_github(cls, status: str) -> ChangeKind:
        """Map a GitHub file ``status`` onto a change kind."""
        try:
            return _GITHUB_STATUSES[status]
        except KeyError:
            raise InvalidChangeError(f"Unknown file change status: '{status}'") from None


# "changed" and "unchanged" are undocumented statuses the commits API can return.
_GITHUB_STATUSES: dict[str, ChangeKind] = {
    "added": ChangeKind.ADDED,
    "copied": ChangeKind.ADDED,
    "modified": ChangeKind.MODIFIED,
    "changed": ChangeKind.MODIFIED,
    "unchanged": ChangeKind.MODIFIED,
    "removed": ChangeKind.REMOVED,
    "renamed": ChangeKind.RENAMED,
}


class EventType(str, Enum):
    """Lifecycle notifications emitted for each affected directory."""

    SOURCE_CREATED = "source_created"
    SOURCE_UPDATED = "source_updated"
    SOURCE_DELETED = "source_deleted"
    BUILD_STARTED = "build_started"
    BUILD_FINISHED = "build_finished"
    BUILD_FAILED = "build_failed"


class DirectoryStatus(str, Enum):
    """Lifecycle status of a service directory within one commit."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"

    @property
    def event_type(self) -> EventType:
        """The source-status event announcing this status."""
        return _SOURCE_EVENTS[self]


_SOURCE_EVENTS: dict[DirectoryStatus, EventType] = {
    DirectoryStatus.CREATED: EventType.SOURCE_CREATED,
    DirectoryStatus.UPDATED: EventType.SOURCE_UPDATED,
    DirectoryStatus.DELETED: EventType.SOURCE_DELETED,
}

# Directory path → status.  Keys are normalised (no trailing slash, never ".").
ClassificationResult = dict[str, DirectoryStatus]


@dataclass(frozen=True, slots=True)
class ChangeEntry:
    """One file-level change of a commit.

    ``previous_path`` is set if and only if ``kind`` is ``RENAMED``.
    """

    path: str
    kind: ChangeKind
    previous_path: str | None = None

    def __post_init__(self) -> None:
        if (self.kind is ChangeKind.RENAMED) != (self.previous_path is not None):
            raise InvalidChangeError(
                f"previous_path must be set exactly for renamed files: {self.path}"
            )

    @property
    def file_name(self) -> str:
        return posixpath.basename(self.path)


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """A single entry of a directory listing."""

    name: str
    is_directory: bool = False


@dataclass(frozen=True, slots=True)
class DirectoryResult:
    """What happened to one directory during an orchestrator run."""

    directory: str
    status: DirectoryStatus
    built: bool = False
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True, slots=True)
class RunReport:
    """Aggregated outcome of one orchestrator run."""

    results: list[DirectoryResult] = field(default_factory=list)

    @property
    def failed(self) -> list[DirectoryResult]:
        return [r for r in self.results if r.failed]

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1
