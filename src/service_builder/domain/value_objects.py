"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from service_builder.domain.exceptions import InvalidRepositoryError

_REPO_SLUG_RE = re.compile(r"^(?P<owner>[A-Za-z0-9\-_.]+)/(?P<repo>[A-Za-z0-9\-_.]+)$")


@dataclass(frozen=True, slots=True)
class GitHubRepo:
    """Validated GitHub repository slug.

    Parses the ``owner/repo`` form found in ``GITHUB_REPOSITORY``.  Rejects
    anything that does not match the expected pattern.
    """

    owner: str
    repo: str

    @classmethod
    def from_string(cls, slug: str) -> GitHubRepo:
        """Parse and validate a raw ``owner/repo`` string."""
        slug = slug.strip()
        match = _REPO_SLUG_RE.match(slug)
        if not match:
            raise InvalidRepositoryError(
                f"Invalid repository: '{slug}'. Expected format: <owner>/<repo>"
            )
        return cls(owner=match["owner"], repo=match["repo"])

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
