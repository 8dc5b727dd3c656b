"""Link composer: media identity -> the URL a Discord user is handed.

Links point either straight at a provider embed page or, when the proxy is
enabled, at the local iframe-unwrapping proxy using the same path shape::

    https://vidsrc.to/embed/tv/1396/1/1
    https://bot.example/proxy/vidsrc/tv/1396/1/1
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import structlog

from streambot.domain.entities.streaming import (
    MEDIA_TYPES,
    MediaType,
    Provider,
    StreamTarget,
    WatchLink,
)
from streambot.domain.exceptions import (
    InvalidStreamTargetError,
    UnsupportedMediaTypeError,
)
from streambot.domain.ports.id_mapping import IdMappingPort
from streambot.domain.ports.metadata import MetadataPort
from streambot.domain.ports.provider_registry import ProviderRegistryPort

log = structlog.get_logger(__name__)

PROXY_ROOT = "proxy"


def media_path(
    media_type: MediaType | None,
    tmdb_id: int | None,
    season: int | None = None,
    episode: int | None = None,
) -> str:
    """Build ``/movie/{id}`` or ``/tv/{id}/{season}/{episode}``.

    Raises:
        UnsupportedMediaTypeError: *media_type* is not movie/tv.
        InvalidStreamTargetError: Required ids are missing or not positive.
    """
    if media_type not in MEDIA_TYPES:
        raise UnsupportedMediaTypeError(
            f"Invalid media type {media_type!r}. Must be 'movie' or 'tv'"
        )
    if not tmdb_id:
        raise InvalidStreamTargetError("TMDB ID is required")
    if media_type == "movie":
        return f"/movie/{tmdb_id}"

    if not season or not episode:
        raise InvalidStreamTargetError("TMDB ID, season, and episode are required")
    if season < 1 or episode < 1:
        raise InvalidStreamTargetError("Season and episode must be positive numbers")
    return f"/tv/{tmdb_id}/{season}/{episode}"


class LinkComposer:
    """Composes provider and proxy URLs from the provider registry.

    Pure apart from logging; the optional metadata / id-mapping
    collaborators are only consulted for anime links.
    """

    def __init__(
        self,
        registry: ProviderRegistryPort,
        *,
        proxy_enabled: bool = False,
        public_base_url: str = "http://localhost:3001",
        metadata: MetadataPort | None = None,
        id_mapping: IdMappingPort | None = None,
    ) -> None:
        self._registry = registry
        self._proxy_enabled = proxy_enabled
        self._public_base_url = public_base_url.rstrip("/")
        self._metadata = metadata
        self._id_mapping = id_mapping

    @property
    def proxy_enabled(self) -> bool:
        return self._proxy_enabled

    # ------------------------------------------------------------------
    # URL building
    # ------------------------------------------------------------------

    def _proxy_url(self, provider: Provider, path: str) -> str:
        return f"{self._public_base_url}/{PROXY_ROOT}/{provider.slug}{path}"

    def _route(self, provider: Provider, path: str) -> str:
        if self._proxy_enabled:
            return self._proxy_url(provider, path)
        return f"{provider.base_url}{path}"

    def build_embed_url(self, provider: Provider, target: StreamTarget) -> str:
        """Raw upstream embed URL for a TMDB-addressed target (never proxied)."""
        if not provider.uses_tmdb_ids:
            raise InvalidStreamTargetError(
                f"Provider '{provider.slug}' is not addressed by TMDB id"
            )
        path = media_path(
            target.media_type, target.tmdb_id, target.season, target.episode
        )
        if not provider.supports(target.media_type):  # type: ignore[arg-type]
            raise InvalidStreamTargetError(
                f"Provider '{provider.slug}' does not serve {target.media_type}"
            )
        return f"{provider.base_url}{path}"

    def build_movie_url(self, provider: Provider, tmdb_id: int) -> str:
        return self._route(provider, media_path("movie", tmdb_id))

    def build_tv_url(
        self, provider: Provider, tmdb_id: int, season: int, episode: int
    ) -> str:
        return self._route(provider, media_path("tv", tmdb_id, season, episode))

    def build_passthrough_url(
        self, provider: Provider, direct_url: str, media_type: MediaType = "tv"
    ) -> str:
        """Link for an already-resolved target URL.

        With the proxy enabled the URL travels percent-encoded in ``?url=``,
        otherwise it is returned unchanged.
        """
        if not self._proxy_enabled:
            return direct_url
        return (
            f"{self._proxy_url(provider, f'/{media_type}')}"
            f"?url={quote(direct_url, safe='')}"
        )

    # ------------------------------------------------------------------
    # Link lists
    # ------------------------------------------------------------------

    def _tmdb_providers(self, media_type: MediaType) -> list[Provider]:
        return [
            p for p in self._registry.list_providers(media_type) if p.uses_tmdb_ids
        ]

    def build_all_movie_links(self, tmdb_id: int) -> list[WatchLink]:
        """One link per movie provider, in registry order."""
        path = media_path("movie", tmdb_id)
        return [
            WatchLink(name=p.name, url=self._route(p, path), emoji=p.emoji)
            for p in self._tmdb_providers("movie")
        ]

    def build_all_tv_links(
        self, tmdb_id: int, season: int, episode: int
    ) -> list[WatchLink]:
        """One link per TV provider, in registry order."""
        path = media_path("tv", tmdb_id, season, episode)
        return [
            WatchLink(name=p.name, url=self._route(p, path), emoji=p.emoji)
            for p in self._tmdb_providers("tv")
        ]

    def build_primary_movie_link(self, tmdb_id: int, title: str = "") -> str:
        """URL of the first movie provider."""
        providers = self._tmdb_providers("movie")
        if not providers:
            raise InvalidStreamTargetError("No provider serves movies")
        url = self.build_movie_url(providers[0], tmdb_id)
        if title:
            log.info("movie_link_generated", title=title, tmdb_id=tmdb_id)
        return url

    def build_primary_tv_link(
        self, tmdb_id: int, season: int, episode: int, title: str = ""
    ) -> str:
        """URL of the first TV provider."""
        providers = self._tmdb_providers("tv")
        if not providers:
            raise InvalidStreamTargetError("No provider serves TV")
        url = self.build_tv_url(providers[0], tmdb_id, season, episode)
        if title:
            log.info(
                "tv_link_generated",
                title=title,
                tmdb_id=tmdb_id,
                season=season,
                episode=episode,
            )
        return url

    def build_link(self, media: Mapping[str, Any]) -> str:
        """Primary link for a TMDB-style media dict.

        Expects ``id`` and ``media_type`` (or ``type``); TV entries default to
        season 1 episode 1.
        """
        if not media or not media.get("id"):
            raise InvalidStreamTargetError("Media object with id is required")

        media_type = media.get("media_type") or media.get("type")
        title = media.get("title") or media.get("name") or ""
        if media_type == "movie":
            return self.build_primary_movie_link(media["id"], title)
        if media_type == "tv":
            return self.build_primary_tv_link(
                media["id"],
                media.get("season") or 1,
                media.get("episode") or 1,
                title,
            )
        raise UnsupportedMediaTypeError(
            f"Invalid media type {media_type!r}. Must be 'movie' or 'tv'"
        )

    @staticmethod
    def validate_availability(tmdb_id: int | None, media_type: str) -> bool:
        return bool(tmdb_id) and media_type in MEDIA_TYPES

    # ------------------------------------------------------------------
    # Anime
    # ------------------------------------------------------------------

    async def _lookup_mal_id(self, tmdb_id: int) -> int | None:
        """TMDB id -> title/year -> MAL id. None on any failure."""
        if self._metadata is None or self._id_mapping is None:
            log.debug("mal_lookup_unavailable", tmdb_id=tmdb_id)
            return None
        try:
            info = await self._metadata.get_title_and_year(tmdb_id, "tv")
            if info is None:
                log.info("mal_lookup_no_title", tmdb_id=tmdb_id)
                return None
            ids = await self._id_mapping.find_ids(info.title, info.year)
        except Exception:
            log.warning("mal_lookup_failed", tmdb_id=tmdb_id, exc_info=True)
            return None
        return ids.mal_id

    async def build_anime_augmented_tv_links(
        self,
        tmdb_id: int | None,
        season: int,
        episode: int,
        *,
        mal_id: int | None = None,
        direct_urls: Mapping[str, str] | None = None,
    ) -> list[WatchLink]:
        """TV links plus one link per anime provider that can be resolved.

        ``path-mal`` providers need a MAL id (given, or looked up through the
        metadata and id-mapping collaborators when only a TMDB id is known);
        ``passthrough`` providers need an entry in *direct_urls*. Providers
        that cannot be resolved are left out.
        """
        if not episode or episode < 1:
            raise InvalidStreamTargetError("Episode must be a positive number")

        links = self.build_all_tv_links(tmdb_id, season, episode) if tmdb_id else []

        anime_providers = [
            p for p in self._registry.list_providers("tv") if not p.uses_tmdb_ids
        ]
        if not anime_providers:
            return links

        if (
            mal_id is None
            and tmdb_id
            and any(p.mode == "path-mal" for p in anime_providers)
        ):
            mal_id = await self._lookup_mal_id(tmdb_id)

        direct_urls = direct_urls or {}
        skipped: list[str] = []
        for provider in anime_providers:
            if provider.mode == "path-mal":
                if mal_id is None:
                    skipped.append(provider.slug)
                    continue
                target = f"{provider.base_url}/{mal_id}/{episode}"
                url = self.build_passthrough_url(provider, target, "tv")
            else:
                direct = direct_urls.get(provider.slug)
                if not direct:
                    skipped.append(provider.slug)
                    continue
                url = self.build_passthrough_url(provider, direct, "tv")
            links.append(WatchLink(name=provider.name, url=url, emoji=provider.emoji))

        if skipped:
            log.info(
                "anime_providers_unresolved",
                tmdb_id=tmdb_id,
                mal_id=mal_id,
                providers=skipped,
            )
        return links
