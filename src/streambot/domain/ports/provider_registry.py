"""Port for provider lookup."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streambot.domain.entities.streaming import MediaType, Provider


@runtime_checkable
class ProviderRegistryPort(Protocol):
    """Read-only provider table, in registration order."""

    def list_providers(self, media_type: MediaType | None = None) -> list[Provider]: ...

    def find_by_slug(self, slug: str) -> Provider:
        """Raises ``UnknownProviderError`` when *slug* is not registered."""
        ...
