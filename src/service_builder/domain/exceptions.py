"""Domain exception hierarchy.

Inner layers raise these; adapters translate library errors into them and
the outer layers (CLI exit code, HTTP error handlers) decide what is fatal.
"""

from __future__ import annotations


class ServiceBuilderError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidRepositoryError(ServiceBuilderError):
    """The configured repository is not a valid ``owner/repo`` slug."""


class InvalidChangeError(ServiceBuilderError):
    """A file change entry is malformed or carries an unknown status."""


# ── Classification ──────────────────────────────────────────────────────────


class DirectoryNotFoundError(ServiceBuilderError):
    """A directory listing was requested for a path that does not exist."""


class RootNotFoundError(ServiceBuilderError):
    """No ancestor of a changed file owns the root marker.

    Recoverable: the classifier skips the entry.
    """


# ── Commit diff errors ──────────────────────────────────────────────────────


class DiffFetchError(ServiceBuilderError):
    """The commit diff could not be retrieved.  Aborts the whole run."""


class CommitNotFoundError(DiffFetchError):
    """The commit (or repository) does not exist (404)."""


class RepositoryAccessDeniedError(DiffFetchError):
    """Access to the repository was denied (403)."""


class GitHubRateLimitError(DiffFetchError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


# ── Build / publish ─────────────────────────────────────────────────────────


class BuildError(ServiceBuilderError):
    """Building or pushing the image of one directory failed."""


# ── Events ──────────────────────────────────────────────────────────────────


class EventEmissionError(ServiceBuilderError):
    """A lifecycle event could not be delivered.  Logged, never escalated."""


class EventCredentialsError(ServiceBuilderError):
    """The events API rejected the client id / secret exchange."""


# ── Workspace ───────────────────────────────────────────────────────────────


class WorkspaceError(ServiceBuilderError):
    """The working tree is not a readable git checkout."""


class WorkspaceMismatchError(WorkspaceError):
    """The working tree is checked out at a different commit than requested."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Workspace is at {actual}, not at the requested commit {expected}"
        )
