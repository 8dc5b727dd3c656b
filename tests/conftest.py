"""Shared test fixtures for the StreamBot proxy test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from streambot.domain.entities import ExternalIds, Provider, TitleInfo
from streambot.infrastructure.providers import BUILTIN_PROVIDERS, ProviderRegistry

# ---------------------------------------------------------------------------
# Provider fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def vidsrc() -> Provider:
    """First built-in provider (vidsrc.to)."""
    return BUILTIN_PROVIDERS[0]


@pytest.fixture()
def mal_provider() -> Provider:
    """Anime provider addressed by MyAnimeList id."""
    return Provider(
        name="AnimeEmbed",
        slug="animeembed",
        base_url="https://anime.example/embed",
        emoji="🍥",
        supported_types=frozenset({"tv"}),
        mode="path-mal",
    )


@pytest.fixture()
def passthrough_provider() -> Provider:
    """Anime provider that only works with pre-resolved URLs."""
    return Provider(
        name="Cinetaro",
        slug="cinetaro",
        base_url="https://cinetaro.example",
        emoji="🎞️",
        supported_types=frozenset({"tv"}),
        mode="passthrough",
    )


@pytest.fixture()
def registry() -> ProviderRegistry:
    """Registry with only the built-in providers."""
    return ProviderRegistry(BUILTIN_PROVIDERS)


@pytest.fixture()
def anime_registry(
    mal_provider: Provider, passthrough_provider: Provider
) -> ProviderRegistry:
    """Built-ins followed by one path-mal and one passthrough provider."""
    return ProviderRegistry([*BUILTIN_PROVIDERS, mal_provider, passthrough_provider])


# ---------------------------------------------------------------------------
# Lookup port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_metadata() -> AsyncMock:
    """MetadataPort mock resolving every id to 'Frieren' (2023)."""
    metadata = AsyncMock()
    metadata.get_title_and_year.return_value = TitleInfo(title="Frieren", year=2023)
    metadata.get_details.return_value = {"id": 209867, "name": "Frieren"}
    return metadata


@pytest.fixture()
def mock_id_mapping() -> AsyncMock:
    """IdMappingPort mock returning MAL id 52991."""
    id_mapping = AsyncMock()
    id_mapping.find_ids.return_value = ExternalIds(anilist_id=154587, mal_id=52991)
    return id_mapping
