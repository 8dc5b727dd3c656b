"""Tests for ProviderRegistry, extra-provider parsing and merging."""

from __future__ import annotations

import json

import pytest

from streambot.domain.entities import Provider
from streambot.domain.exceptions import UnknownProviderError
from streambot.infrastructure.providers import (
    BUILTIN_PROVIDERS,
    ProviderDefinition,
    ProviderRegistry,
    merge_providers,
    parse_extra_providers,
)


def _extra(slug: str = "animeembed", **overrides: object) -> dict[str, object]:
    entry: dict[str, object] = {
        "name": "Anime Embed",
        "slug": slug,
        "baseUrl": "https://anime.example/embed/",
        "emoji": "🍥",
    }
    entry.update(overrides)
    return entry


# ---------------------------------------------------------------------------
# Built-ins
# ---------------------------------------------------------------------------


class TestBuiltinProviders:
    def test_order(self) -> None:
        assert [p.slug for p in BUILTIN_PROVIDERS] == [
            "vidsrc",
            "vidsrcme",
            "vidsrcpro",
        ]

    def test_base_urls(self) -> None:
        assert BUILTIN_PROVIDERS[0].base_url == "https://vidsrc.to/embed"
        assert BUILTIN_PROVIDERS[1].base_url == "https://vidsrc.me/embed"
        assert BUILTIN_PROVIDERS[2].base_url == "https://vidsrc.pro/embed"

    def test_builtins_serve_movie_and_tv(self) -> None:
        for p in BUILTIN_PROVIDERS:
            assert p.supports("movie")
            assert p.supports("tv")
            assert p.uses_tmdb_ids


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestProviderRegistry:
    def test_find_by_slug(self, registry: ProviderRegistry) -> None:
        assert registry.find_by_slug("vidsrcme").name == "VidSrc Me"

    def test_find_by_slug_is_exact(self, registry: ProviderRegistry) -> None:
        with pytest.raises(UnknownProviderError):
            registry.find_by_slug("VIDSRC")

    def test_unknown_slug_raises(self, registry: ProviderRegistry) -> None:
        with pytest.raises(UnknownProviderError, match="Unsupported provider: nope"):
            registry.find_by_slug("nope")

    def test_duplicate_slug_rejected(self) -> None:
        p = Provider(name="A", slug="a", base_url="https://a.example")
        with pytest.raises(ValueError, match="Duplicate"):
            ProviderRegistry([p, p])

    def test_list_filters_by_media_type(
        self, anime_registry: ProviderRegistry
    ) -> None:
        movie_slugs = [p.slug for p in anime_registry.list_providers("movie")]
        tv_slugs = [p.slug for p in anime_registry.list_providers("tv")]
        assert movie_slugs == ["vidsrc", "vidsrcme", "vidsrcpro"]
        assert tv_slugs == [
            "vidsrc",
            "vidsrcme",
            "vidsrcpro",
            "animeembed",
            "cinetaro",
        ]

    def test_list_all(self, anime_registry: ProviderRegistry) -> None:
        assert len(anime_registry.list_providers()) == len(anime_registry) == 5

    def test_list_returns_copy(self, registry: ProviderRegistry) -> None:
        registry.list_providers().clear()
        assert len(registry) == 3


# ---------------------------------------------------------------------------
# Extra provider parsing
# ---------------------------------------------------------------------------


class TestParseExtraProviders:
    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_input(self, raw: str | None) -> None:
        assert parse_extra_providers(raw) == []

    def test_invalid_json_yields_empty(self) -> None:
        assert parse_extra_providers("[{not json") == []

    def test_non_list_yields_empty(self) -> None:
        assert parse_extra_providers(json.dumps(_extra())) == []

    def test_valid_entry(self) -> None:
        providers = parse_extra_providers(json.dumps([_extra()]))
        assert len(providers) == 1
        p = providers[0]
        assert p.slug == "animeembed"
        assert p.base_url == "https://anime.example/embed"  # trailing slash stripped
        assert p.mode == "path-mal"
        assert not p.uses_tmdb_ids

    def test_snake_case_base_url_accepted(self) -> None:
        entry = _extra()
        entry["base_url"] = entry.pop("baseUrl")
        providers = parse_extra_providers(json.dumps([entry]))
        assert providers[0].base_url == "https://anime.example/embed"

    def test_types_restrict_support(self) -> None:
        providers = parse_extra_providers(json.dumps([_extra(types=["tv"])]))
        assert providers[0].supports("tv")
        assert not providers[0].supports("movie")

    def test_malformed_entries_dropped(self) -> None:
        raw = json.dumps(
            [
                _extra("good"),
                {"name": "No slug", "baseUrl": "https://x"},
                _extra("blank", name="  "),
                _extra("badmode", mode="magic"),
                "not-an-object",
            ]
        )
        assert [p.slug for p in parse_extra_providers(raw)] == ["good"]

    def test_definition_model(self) -> None:
        d = ProviderDefinition.model_validate(_extra(mode="passthrough"))
        assert d.to_provider().mode == "passthrough"


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


class TestMergeProviders:
    def test_builtins_first_then_extras(self) -> None:
        extras = parse_extra_providers(json.dumps([_extra()]))
        merged = merge_providers(BUILTIN_PROVIDERS, extras)
        assert merged.slugs == ["vidsrc", "vidsrcme", "vidsrcpro", "animeembed"]

    def test_colliding_extra_dropped(self) -> None:
        extras = parse_extra_providers(json.dumps([_extra("vidsrc"), _extra("x")]))
        merged = merge_providers(BUILTIN_PROVIDERS, extras)
        assert merged.slugs == ["vidsrc", "vidsrcme", "vidsrcpro", "x"]
        assert merged.find_by_slug("vidsrc").base_url == "https://vidsrc.to/embed"

    def test_duplicate_extras_keep_first(self) -> None:
        extras = parse_extra_providers(
            json.dumps([_extra("x", name="First"), _extra("x", name="Second")])
        )
        merged = merge_providers(BUILTIN_PROVIDERS, extras)
        assert merged.find_by_slug("x").name == "First"

    def test_no_extras(self) -> None:
        assert len(merge_providers(BUILTIN_PROVIDERS, [])) == 3
