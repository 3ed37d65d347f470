"""Command line interface.

``build`` runs once for a commit (what a CI runner calls) and exits non-zero
when the run aborted or any directory failed to build.  ``serve`` starts the
HTTP trigger server.
"""

from __future__ import annotations

import asyncio
import logging

import click
import uvicorn
from pydantic import ValidationError

from service_builder.domain.entities import RunReport
from service_builder.domain.exceptions import ServiceBuilderError
from service_builder.infrastructure.config import Settings, get_settings
from service_builder.interface.dependencies import (
    build_use_case,
    create_builder,
    create_http_client,
    resolve_events_api_key,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration:\n{exc}") from exc


async def run_build(settings: Settings, commit_sha: str) -> RunReport:
    """Wire the adapters, run the use case and release the HTTP client."""
    async with create_http_client(settings) as client:
        api_key = await resolve_events_api_key(settings, client)
        use_case = build_use_case(
            settings, client, commit_sha, api_key, create_builder(settings)
        )
        return await use_case.execute(commit_sha)


@click.group()
def cli() -> None:
    """Build and publish the services touched by a commit."""


@cli.command()
@click.argument("commit_sha", required=False)
@click.option(
    "--sequential/--concurrent",
    default=None,
    help="Build one directory at a time (defaults to SEQUENTIAL_BUILDS).",
)
@click.option(
    "--max-concurrent",
    type=click.IntRange(min=1),
    default=None,
    help="Cap on builds running at once (defaults to MAX_CONCURRENT_BUILDS).",
)
@click.option("--debug", is_flag=True, default=False, help="Stream docker output.")
def build(
    commit_sha: str | None,
    sequential: bool | None,
    max_concurrent: int | None,
    debug: bool,
) -> None:
    """Build every service directory affected by COMMIT_SHA (defaults to GITHUB_SHA)."""
    settings = _load_settings()
    updates: dict[str, object] = {}
    if sequential is not None:
        updates["sequential_builds"] = sequential
    if max_concurrent is not None:
        updates["max_concurrent_builds"] = max_concurrent
    if debug:
        updates["debug"] = True
    if updates:
        settings = settings.model_copy(update=updates)

    configure_logging("DEBUG" if settings.debug else settings.log_level)

    sha = commit_sha or settings.github_sha
    if not sha:
        raise click.UsageError("No commit given and GITHUB_SHA is not set.")

    try:
        report = asyncio.run(run_build(settings, sha))
    except ServiceBuilderError as exc:
        logger.error("Run aborted: %s", exc)
        raise SystemExit(1) from exc

    raise SystemExit(report.exit_code)


@cli.command()
def serve() -> None:
    """Start the uvicorn ASGI server."""
    settings = _load_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "service_builder.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
