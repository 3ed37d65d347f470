"""GitHub REST API adapter — implements the CommitSource port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from service_builder.domain.entities import ChangeEntry, ChangeKind
from service_builder.domain.exceptions import (
    CommitNotFoundError,
    DiffFetchError,
    GitHubRateLimitError,
    InvalidChangeError,
    RepositoryAccessDeniedError,
)
from service_builder.domain.value_objects import GitHubRepo

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"


class GitHubCommitAdapter:
    """Concrete CommitSource backed by the GitHub v3 commits API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        repo: GitHubRepo,
        token: str | None = None,
        api_url: str = _GITHUB_API,
    ) -> None:
        self._client = client
        self._repo = repo
        self._api_url = api_url.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "service-builder/1.0",
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def fetch_changes(self, commit_sha: str) -> list[ChangeEntry]:
        """GET /repos/{owner}/{repo}/commits/{sha} → [ChangeEntry], all pages."""
        url: str | None = (
            f"{self._api_url}/repos/{self._repo.owner}/{self._repo.repo}/commits/{commit_sha}"
        )
        files: list[dict[str, Any]] = []
        while url:
            resp = await self._api_get(url)
            files.extend(resp.json().get("files") or [])
            url = resp.links.get("next", {}).get("url")

        logger.info(
            "Commit %s of %s touches %d file(s)",
            commit_sha[:12],
            self._repo.full_name,
            len(files),
        )
        try:
            return [_to_change_entry(item) for item in files]
        except (InvalidChangeError, KeyError) as exc:
            raise DiffFetchError(f"Unexpected file entry in commit {commit_sha}: {exc}") from exc

    async def _api_get(self, url: str) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        try:
            resp = await self._client.get(url, headers=self._api_headers)
        except httpx.HTTPError as exc:
            raise DiffFetchError(f"Network error fetching {url}: {exc}") from exc

        if resp.status_code == 200:
            return resp

        if resp.status_code in (404, 422):
            raise CommitNotFoundError(
                f"Commit not found in {self._repo.full_name}. "
                "Make sure the SHA exists and the token can read the repository."
            )

        if resp.status_code == 403:
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if remaining == "0":
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise GitHubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}."
                )
            raise RepositoryAccessDeniedError(
                f"Access denied to {self._repo.full_name}. Check the token permissions."
            )

        if resp.status_code == 429:
            raise GitHubRateLimitError("GitHub API rate limit exceeded (HTTP 429).")

        raise DiffFetchError(f"GitHub API returned HTTP {resp.status_code} for {url}")


def _to_change_entry(item: dict[str, Any]) -> ChangeEntry:
    kind = ChangeKind.from_github(item.get("status", ""))
    previous = item.get("previous_filename") if kind is ChangeKind.RENAMED else None
    return ChangeEntry(path=item["filename"], kind=kind, previous_path=previous)
