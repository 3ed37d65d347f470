"""Application configuration — loaded from environment variables.

Names follow the variables a GitHub Actions runner exports (``GITHUB_*``,
``INPUT_*``) so the same settings work inside and outside an action.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    github_repository: str = Field(validation_alias="GITHUB_REPOSITORY")
    github_token: SecretStr = Field(
        validation_alias=AliasChoices("INPUT_GITHUB_TOKEN", "GITHUB_TOKEN")
    )
    github_sha: str | None = Field(default=None, validation_alias="GITHUB_SHA")
    build_id: str = Field(default="local", validation_alias="GITHUB_RUN_ID")

    client_id: str | None = Field(default=None, validation_alias="INPUT_CLIENT_ID")
    client_secret: SecretStr | None = Field(
        default=None, validation_alias="INPUT_CLIENT_SECRET"
    )
    events_url: str = "https://api.micro.mu"

    registry: str = "docker.pkg.github.com"
    root_marker: str = "go.mod"
    rebuild_trigger: str = ".github/workflows/deploy.yaml"
    workspace: Path = Field(
        default=Path("."), validation_alias=AliasChoices("WORKSPACE", "GITHUB_WORKSPACE")
    )

    verify_workspace: bool = True

    sequential_builds: bool = False
    max_concurrent_builds: int | None = Field(default=None, ge=1)
    debug: bool = Field(default=False, validation_alias=AliasChoices("INPUT_DEBUG", "DEBUG"))

    http_timeout: float = 30.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def has_event_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()  # type: ignore[call-arg]
