"""Events API adapter — implements the EventEmitter port."""

from __future__ import annotations

import logging

import httpx

from service_builder.domain.entities import EventType
from service_builder.domain.exceptions import EventCredentialsError, EventEmissionError

logger = logging.getLogger(__name__)


async def exchange_credentials(
    client: httpx.AsyncClient, events_url: str, client_id: str, client_secret: str
) -> str:
    """Exchange a client id / secret for an API token."""
    url = f"{events_url.rstrip('/')}/auth/Login"
    try:
        resp = await client.post(url, json={"id": client_id, "secret": client_secret})
    except httpx.HTTPError as exc:
        raise EventCredentialsError(f"Error connecting to the events API: {exc}") from exc

    if not resp.is_success:
        raise EventCredentialsError(
            f"Bad credentials. Status: {resp.status_code}. Response: {resp.text}"
        )

    try:
        token = resp.json()["token"]
    except (ValueError, KeyError, TypeError) as exc:
        raise EventCredentialsError("Invalid response from the events API.") from exc
    if not token:
        raise EventCredentialsError("Events API returned an empty token.")
    return str(token)


class EventsApiEmitter:
    """Concrete EventEmitter posting to the ``/events/create`` endpoint."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        events_url: str,
        api_key: str,
        commit_id: str,
        build_id: str,
    ) -> None:
        self._client = client
        self._url = f"{events_url.rstrip('/')}/events/create"
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._commit_id = commit_id
        self._build_id = build_id

    async def emit(
        self, directory: str, event_type: EventType, error: str | None = None
    ) -> None:
        metadata = {
            "service": directory,
            "commit": self._commit_id,
            "build": self._build_id,
        }
        if error is not None:
            metadata["error"] = error

        try:
            resp = await self._client.post(
                self._url,
                headers=self._headers,
                json={"type": event_type.value, "metadata": metadata},
            )
        except httpx.HTTPError as exc:
            raise EventEmissionError(f"Unable to connect to the events API: {exc}") from exc

        if not resp.is_success:
            raise EventEmissionError(
                f"Request error. Status: {resp.status_code}. Response: {resp.text}"
            )
        logger.debug("Emitted %s for %s", event_type.value, directory)


class LoggingEventEmitter:
    """EventEmitter used when no events API credentials are configured."""

    async def emit(
        self, directory: str, event_type: EventType, error: str | None = None
    ) -> None:
        if error is None:
            logger.info("Event %s for %s", event_type.value, directory)
        else:
            logger.info("Event %s for %s: %s", event_type.value, directory, error)
