"""GitPython adapter — implements the Workspace port."""

from __future__ import annotations

import logging
from pathlib import Path

from git import InvalidGitRepositoryError, NoSuchPathError, Repo

from service_builder.domain.exceptions import WorkspaceError

logger = logging.getLogger(__name__)


class GitWorkspace:
    """Concrete Workspace reading ``HEAD`` of a local clone."""

    def __init__(self, path: Path | str = ".") -> None:
        self._path = Path(path)

    def head_sha(self) -> str:
        try:
            repo = Repo(self._path)
        except (InvalidGitRepositoryError, NoSuchPathError) as exc:
            raise WorkspaceError(f"{self._path} is not a git checkout") from exc

        try:
            # ValueError on a repository without commits
            sha = repo.head.commit.hexsha
        except ValueError as exc:
            raise WorkspaceError(f"{self._path} has no checked-out commit") from exc
        finally:
            repo.close()

        logger.debug("Workspace %s is at %s", self._path, sha)
        return sha
