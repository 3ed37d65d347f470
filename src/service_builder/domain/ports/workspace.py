"""Port: the checked-out working tree as a git repository."""

from __future__ import annotations

from typing import Protocol


class Workspace(Protocol):
    """Reports which commit the working tree is checked out at."""

    def head_sha(self) -> str:
        """Return the full hex SHA of ``HEAD``.

        Raises :class:`WorkspaceError` when the tree is not a git checkout.
        """
        ...
