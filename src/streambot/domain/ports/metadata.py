"""Port for TMDB-style metadata lookups."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from streambot.domain.entities.streaming import MediaType, TitleInfo


@runtime_checkable
class MetadataPort(Protocol):
    """Async interface for title metadata by TMDB id."""

    async def get_details(
        self, tmdb_id: int, media_type: MediaType
    ) -> dict[str, Any] | None:
        """Return ``{id, title|name, release_date|first_air_date, ...}`` or None."""
        ...

    async def get_title_and_year(
        self, tmdb_id: int, media_type: MediaType
    ) -> TitleInfo | None:
        """Return display title and release year, or None if unknown."""
        ...
