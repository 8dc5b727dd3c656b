"""Immutable provider registry and its startup merge."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from typing import Any, Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from streambot.domain.entities.streaming import MediaType, Provider, ProviderMode
from streambot.domain.exceptions import UnknownProviderError

log = structlog.get_logger(__name__)


class ProviderDefinition(BaseModel):
    """One entry of the externally supplied provider list (JSON).

    Example::

        [{"name": "Anime Embed", "slug": "animeembed",
          "baseUrl": "https://anime.example/embed", "emoji": "🍥"}]
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    slug: str
    base_url: str = Field(alias="baseUrl")
    emoji: str = ""
    types: list[Literal["movie", "tv"]] = Field(default_factory=list)
    mode: ProviderMode = "path-mal"

    @field_validator("name", "slug", "base_url")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    def to_provider(self) -> Provider:
        return Provider(
            name=self.name,
            slug=self.slug,
            base_url=self.base_url.rstrip("/"),
            emoji=self.emoji,
            supported_types=frozenset(self.types),
            mode=self.mode,
        )


class ProviderRegistry:
    """Read-only, ordered provider table.

    Registration order is display order; the first provider matching a media
    type is the primary one.
    """

    def __init__(self, providers: Iterable[Provider]) -> None:
        self._providers: tuple[Provider, ...] = tuple(providers)
        self._by_slug: dict[str, Provider] = {}
        for provider in self._providers:
            if provider.slug in self._by_slug:
                raise ValueError(f"Duplicate provider slug: {provider.slug!r}")
            self._by_slug[provider.slug] = provider

    def __len__(self) -> int:
        return len(self._providers)

    @property
    def slugs(self) -> list[str]:
        return [p.slug for p in self._providers]

    def list_providers(self, media_type: MediaType | None = None) -> list[Provider]:
        """Providers supporting *media_type* (all if None), in registration order."""
        if media_type is None:
            return list(self._providers)
        return [p for p in self._providers if p.supports(media_type)]

    def find_by_slug(self, slug: str) -> Provider:
        """Exact slug match.

        Raises:
            UnknownProviderError: No provider is registered under *slug*.
        """
        try:
            return self._by_slug[slug]
        except KeyError:
            raise UnknownProviderError(slug) from None


def parse_extra_providers(raw: str | None) -> list[Provider]:
    """Parse the optional JSON provider list.

    Malformed entries are dropped with a warning; invalid JSON yields an
    empty list. Never raises.
    """
    if raw is None or not raw.strip():
        return []

    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        log.warning("extra_providers_invalid_json", error=str(exc))
        return []

    if not isinstance(data, list):
        log.warning("extra_providers_not_a_list", got=type(data).__name__)
        return []

    providers: list[Provider] = []
    for index, entry in enumerate(data):
        try:
            definition = ProviderDefinition.model_validate(entry)
        except ValidationError as exc:
            log.warning(
                "extra_provider_dropped",
                index=index,
                errors=exc.error_count(),
                detail=exc.errors(include_url=False, include_input=False),
            )
            continue
        providers.append(definition.to_provider())

    log.info("extra_providers_parsed", accepted=len(providers), total=len(data))
    return providers


def merge_providers(
    builtins: Sequence[Provider], extras: Sequence[Provider]
) -> ProviderRegistry:
    """Build the registry: builtins first, then extras with fresh slugs."""
    merged: list[Provider] = list(builtins)
    seen = {p.slug for p in merged}
    for provider in extras:
        if provider.slug in seen:
            log.warning("extra_provider_duplicate_slug", slug=provider.slug)
            continue
        seen.add(provider.slug)
        merged.append(provider)

    registry = ProviderRegistry(merged)
    log.info("provider_registry_built", providers=registry.slugs)
    return registry
