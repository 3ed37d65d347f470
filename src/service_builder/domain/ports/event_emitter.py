"""Port: lifecycle event emitter."""

from __future__ import annotations

from typing import Protocol

from service_builder.domain.entities import EventType


class EventEmitter(Protocol):
    """Abstract contract for publishing lifecycle notifications."""

    async def emit(
        self, directory: str, event_type: EventType, error: str | None = None
    ) -> None:
        """Publish *event_type* for *directory*, optionally carrying an error message."""
        ...
