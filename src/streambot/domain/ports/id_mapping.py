"""Port for mapping a title to anime database ids."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streambot.domain.entities.streaming import ExternalIds


@runtime_checkable
class IdMappingPort(Protocol):
    """Best-effort title -> (AniList id, MAL id) lookup.

    Implementations never raise; any failure yields ``ExternalIds()``.
    """

    async def find_ids(self, title: str, year: int | None = None) -> ExternalIds: ...
