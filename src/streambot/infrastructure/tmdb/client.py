"""TMDB metadata client (async httpx, cached through CachePort)."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from streambot.domain.entities.streaming import MediaType, TitleInfo
from streambot.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.themoviedb.org/3"

_TTL_DETAILS = 86_400  # 24 hours


class HttpxTmdbClient:
    """Async TMDB client using httpx + CachePort.

    Implements ``MetadataPort`` from domain.ports.metadata.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        cache: CachePort,
        base_url: str = _BASE_URL,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._cache = cache
        self._base_url = base_url.rstrip("/")

    async def _get(self, path: str, **extra: Any) -> dict[str, Any] | None:
        """GET request with error handling. Returns parsed JSON or None."""
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(
                url, params={"api_key": self._api_key, "language": "en-US", **extra}
            )
            if resp.status_code == 401:
                log.error("tmdb_api_key_invalid", status=401)
                return None
            if resp.status_code == 404:
                log.debug("tmdb_resource_not_found", path=path)
                return None
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError:
            log.warning("tmdb_http_error", path=path, exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            return None
        except ValueError:
            log.warning("tmdb_invalid_json", path=path)
            return None

    async def get_details(
        self, tmdb_id: int, media_type: MediaType
    ) -> dict[str, Any] | None:
        """Fetch ``/movie/{id}`` or ``/tv/{id}``. None if unavailable."""
        cache_key = f"tmdb:details:{media_type}:{tmdb_id}"
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        data = await self._get(f"/{media_type}/{tmdb_id}")
        if data is None:
            return None

        await self._cache.set(cache_key, data, ttl=_TTL_DETAILS)
        return data

    async def get_title_and_year(
        self, tmdb_id: int, media_type: MediaType
    ) -> TitleInfo | None:
        details = await self.get_details(tmdb_id, media_type)
        if details is None:
            return None

        # Movies use "title"/"release_date", TV uses "name"/"first_air_date"
        title = details.get("title") or details.get("name") or ""
        if not title:
            return None

        date = details.get("release_date") or details.get("first_air_date") or ""
        year: int | None = None
        if len(date) >= 4 and date[:4].isdigit():
            year = int(date[:4])

        return TitleInfo(title=title, year=year)
