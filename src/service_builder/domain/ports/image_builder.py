"""Port: image build + publish pipeline."""

from __future__ import annotations

from typing import Protocol


class ImageBuilder(Protocol):
    """Abstract contract for building and publishing one service directory."""

    async def build(self, directory: str) -> None:
        """Build and push the artifact for *directory*; raise :class:`BuildError` on failure."""
        ...
