"""Dependency wiring shared by the CLI and the FastAPI server."""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

from service_builder.domain.ports.event_emitter import EventEmitter
from service_builder.domain.ports.image_builder import ImageBuilder
from service_builder.domain.value_objects import GitHubRepo
from service_builder.infrastructure.config import Settings, get_settings
from service_builder.infrastructure.docker_builder import DockerCliBuilder
from service_builder.infrastructure.events_adapter import (
    EventsApiEmitter,
    LoggingEventEmitter,
    exchange_credentials,
)
from service_builder.infrastructure.filesystem import LocalFileSystem
from service_builder.infrastructure.git_workspace import GitWorkspace
from service_builder.infrastructure.github_rest_adapter import GitHubCommitAdapter
from service_builder.services.build_commit import BuildCommitUseCase
from service_builder.services.build_orchestrator import BuildOrchestrator
from service_builder.services.change_classifier import ChangeClassifier
from service_builder.services.root_finder import RootFinder

logger = logging.getLogger(__name__)

UseCaseFactory = Callable[[str], BuildCommitUseCase]

_http_client: httpx.AsyncClient | None = None
_events_api_key: str | None = None
_builder: ImageBuilder | None = None


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout))


async def resolve_events_api_key(
    settings: Settings, client: httpx.AsyncClient
) -> str | None:
    """Exchange the configured client credentials, or return None when there are none."""
    if not settings.has_event_credentials:
        logger.warning("No events API credentials configured, events are only logged")
        return None
    assert settings.client_id is not None and settings.client_secret is not None
    return await exchange_credentials(
        client,
        settings.events_url,
        settings.client_id,
        settings.client_secret.get_secret_value(),
    )


def create_builder(settings: Settings) -> DockerCliBuilder:
    return DockerCliBuilder(
        repo=GitHubRepo.from_string(settings.github_repository),
        token=settings.github_token.get_secret_value(),
        registry=settings.registry,
        workspace=settings.workspace,
        debug=settings.debug,
    )


def build_use_case(
    settings: Settings,
    client: httpx.AsyncClient,
    commit_sha: str,
    events_api_key: str | None,
    builder: ImageBuilder,
) -> BuildCommitUseCase:
    """Wire the concrete adapters for one commit."""
    repo = GitHubRepo.from_string(settings.github_repository)
    commit_source = GitHubCommitAdapter(
        client=client, repo=repo, token=settings.github_token.get_secret_value()
    )
    finder = RootFinder(LocalFileSystem(settings.workspace), settings.root_marker)
    classifier = ChangeClassifier(commit_source, finder, settings.rebuild_trigger)

    emitter: EventEmitter
    if events_api_key:
        emitter = EventsApiEmitter(
            client=client,
            events_url=settings.events_url,
            api_key=events_api_key,
            commit_id=commit_sha,
            build_id=settings.build_id,
        )
    else:
        emitter = LoggingEventEmitter()

    orchestrator = BuildOrchestrator(
        builder=builder,
        emitter=emitter,
        sequential=settings.sequential_builds,
        max_concurrency=settings.max_concurrent_builds,
    )
    workspace = GitWorkspace(settings.workspace) if settings.verify_workspace else None
    return BuildCommitUseCase(classifier, orchestrator, workspace)


# ── Server lifecycle ────────────────────────────────────────────────────────


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client, _events_api_key, _builder  # noqa: PLW0603

    settings = get_settings()
    _http_client = create_http_client(settings)
    _events_api_key = await resolve_events_api_key(settings, _http_client)
    _builder = create_builder(settings)


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _events_api_key, _builder  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None
    _events_api_key = None
    _builder = None


def get_use_case_factory() -> UseCaseFactory:
    """Return a factory building the use case for a given commit."""
    settings = get_settings()

    assert _http_client is not None, "startup() was not called"
    assert _builder is not None, "startup() was not called"
    client, builder, api_key = _http_client, _builder, _events_api_key

    def factory(commit_sha: str) -> BuildCommitUseCase:
        return build_use_case(settings, client, commit_sha, api_key, builder)

    return factory
