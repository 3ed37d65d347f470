"""Port: commit diff source — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from service_builder.domain.entities import ChangeEntry


class CommitSource(Protocol):
    """Abstract contract for retrieving the file-level diff of a commit."""

    async def fetch_changes(self, commit_sha: str) -> list[ChangeEntry]:
        """Return the changed files of *commit_sha* in API order."""
        ...
