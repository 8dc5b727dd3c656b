"""AniList GraphQL client: title/year -> AniList + MyAnimeList ids."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from streambot.domain.entities.streaming import ExternalIds
from streambot.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

ANILIST_ENDPOINT = "https://graphql.anilist.co"

_TTL_IDS = 86_400 * 7  # Mappings rarely change
_TTL_MISS = 3_600

_SEARCH_QUERY = """
query ($search: String, $year: Int) {
  Page(page: 1, perPage: 1) {
    media(search: $search, type: ANIME, seasonYear: $year) {
      id
      idMal
    }
  }
}
"""


class HttpxAnilistClient:
    """Best-effort id lookup against AniList.

    Implements ``IdMappingPort``: every failure (network, HTTP status,
    GraphQL error, unexpected shape) yields ``ExternalIds()``.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        cache: CachePort | None = None,
        endpoint: str = ANILIST_ENDPOINT,
        timeout: float = 5.0,
    ) -> None:
        self._http = http_client
        self._cache = cache
        self._endpoint = endpoint
        self._timeout = timeout

    @staticmethod
    def _cache_key(title: str, year: int | None) -> str:
        return f"anilist:ids:{title.strip().lower()}:{year or ''}"

    async def _post(self, variables: dict[str, Any]) -> Any:
        try:
            resp = await self._http.post(
                self._endpoint,
                json={"query": _SEARCH_QUERY, "variables": variables},
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError:
            log.warning("anilist_request_failed", variables=variables, exc_info=True)
            return None
        except ValueError:
            log.warning("anilist_invalid_json", variables=variables)
            return None

    @staticmethod
    def _parse(payload: dict[str, Any]) -> ExternalIds:
        media = ((payload.get("data") or {}).get("Page") or {}).get("media") or []
        if not media or not isinstance(media[0], dict):
            return ExternalIds()
        first = media[0]
        return ExternalIds(anilist_id=first.get("id"), mal_id=first.get("idMal"))

    async def find_ids(self, title: str, year: int | None = None) -> ExternalIds:
        if not title or not title.strip():
            return ExternalIds()

        key = self._cache_key(title, year)
        if self._cache is not None:
            cached = await self._cache.get(key)
            if cached is not None:
                return ExternalIds(**cached)

        variables: dict[str, Any] = {"search": title}
        if year:
            variables["year"] = year

        payload = await self._post(variables)
        if not isinstance(payload, dict):
            return ExternalIds()

        if payload.get("errors"):
            log.warning("anilist_graphql_error", title=title, errors=payload["errors"])
            return ExternalIds()

        ids = self._parse(payload)
        log.info(
            "anilist_ids_resolved",
            title=title,
            year=year,
            anilist_id=ids.anilist_id,
            mal_id=ids.mal_id,
        )

        if self._cache is not None:
            ttl = _TTL_IDS if ids.mal_id is not None else _TTL_MISS
            await self._cache.set(
                key,
                {"anilist_id": ids.anilist_id, "mal_id": ids.mal_id},
                ttl=ttl,
            )
        return ids
