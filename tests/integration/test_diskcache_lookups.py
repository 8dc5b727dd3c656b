"""Integration tests for DiskcacheAdapter backing the lookup clients."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import respx

from streambot.infrastructure.anilist.client import (
    ANILIST_ENDPOINT,
    HttpxAnilistClient,
)
from streambot.infrastructure.cache import DiskcacheAdapter

pytestmark = pytest.mark.integration


@pytest.fixture()
async def diskcache(tmp_path: Path) -> DiskcacheAdapter:
    """Real DiskcacheAdapter backed by tmp_path (auto-cleaned)."""
    adapter = DiskcacheAdapter(
        directory=tmp_path / "cache",
        ttl_seconds=3600,
        max_concurrent=5,
    )
    async with adapter:
        yield adapter


class TestDiskcacheAdapter:
    @pytest.mark.asyncio()
    async def test_set_get_delete(self, diskcache: DiskcacheAdapter) -> None:
        await diskcache.set("k", {"mal_id": 1})
        assert await diskcache.get("k") == {"mal_id": 1}

        assert await diskcache.delete("k") is True
        assert await diskcache.get("k") is None

    @pytest.mark.asyncio()
    async def test_clear(self, diskcache: DiskcacheAdapter) -> None:
        await diskcache.set("a", 1)
        await diskcache.set("b", 2)
        await diskcache.clear()
        assert await diskcache.get("a") is None
        assert await diskcache.get("b") is None

    @pytest.mark.asyncio()
    async def test_use_before_open_raises(self, tmp_path: Path) -> None:
        adapter = DiskcacheAdapter(directory=tmp_path / "closed")
        with pytest.raises(RuntimeError, match="not initialized"):
            await adapter.get("k")

    @pytest.mark.asyncio()
    async def test_values_survive_reopen(self, tmp_path: Path) -> None:
        directory = tmp_path / "persist"
        async with DiskcacheAdapter(directory=directory) as first:
            await first.set("tmdb:details:tv:1", {"name": "Show"})

        async with DiskcacheAdapter(directory=directory) as second:
            assert await second.get("tmdb:details:tv:1") == {"name": "Show"}


class TestAnilistWithDiskcache:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_second_lookup_served_from_cache(
        self, diskcache: DiskcacheAdapter
    ) -> None:
        route = respx.post(ANILIST_ENDPOINT).respond(
            json={"data": {"Page": {"media": [{"id": 154587, "idMal": 52991}]}}}
        )

        async with httpx.AsyncClient() as http:
            client = HttpxAnilistClient(http_client=http, cache=diskcache)
            first = await client.find_ids("Frieren", 2023)
            second = await client.find_ids("frieren ", 2023)

        assert first == second
        assert second.mal_id == 52991
        assert route.call_count == 1
