"""Iframe-unwrapping proxy endpoint.

    GET /proxy/{slug}/movie/{tmdbId}
    GET /proxy/{slug}/tv/{tmdbId}/{season}/{episode}
    GET /proxy/{slug}/{type}?url=<percent-encoded target>

Query ``format`` selects ``json`` | ``redirect`` | ``html`` (default).
"""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Query, Request
from starlette.responses import Response

from streambot.domain.entities import MEDIA_TYPES, MediaType, StreamTarget
from streambot.domain.exceptions import (
    InvalidStreamTargetError,
    UnknownProviderError,
    UnsupportedMediaTypeError,
)
from streambot.interfaces.api.proxy.presenter import (
    parse_format,
    render_error,
    render_resolved,
)
from streambot.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/proxy", tags=["proxy"])


def _parse_id(raw: str, label: str) -> int:
    if not (raw.isascii() and raw.isdigit()) or int(raw) < 1:
        raise InvalidStreamTargetError(f"{label} must be a positive integer")
    return int(raw)


def _parse_proxy_route(segments: list[str], direct_url: str | None) -> StreamTarget:
    """Turn the path segments after ``/proxy`` into a StreamTarget.

    With *direct_url* only the slug and type segments must be present;
    the ids are not read.
    """
    if len(segments) < 2:
        raise InvalidStreamTargetError("Invalid proxy route")

    slug, media_type, ids = segments[0], segments[1], segments[2:]

    if direct_url:
        return StreamTarget(
            provider_slug=slug,
            media_type=cast(MediaType, media_type) if media_type in MEDIA_TYPES else None,
            direct_url=direct_url,
        )

    if media_type == "movie":
        if not ids:
            raise InvalidStreamTargetError("TMDB ID required")
        if len(ids) != 1:
            raise InvalidStreamTargetError("Invalid proxy route")
        return StreamTarget(
            provider_slug=slug,
            media_type="movie",
            tmdb_id=_parse_id(ids[0], "TMDB ID"),
        )

    if media_type == "tv":
        if len(ids) < 3:
            raise InvalidStreamTargetError("TMDB ID, season, and episode required")
        if len(ids) != 3:
            raise InvalidStreamTargetError("Invalid proxy route")
        return StreamTarget(
            provider_slug=slug,
            media_type="tv",
            tmdb_id=_parse_id(ids[0], "TMDB ID"),
            season=_parse_id(ids[1], "Season"),
            episode=_parse_id(ids[2], "Episode"),
        )

    raise UnsupportedMediaTypeError("Unsupported media type")


@router.get("")
@router.get("/{route:path}")
async def proxy_stream(
    request: Request,
    route: str = "",
    format: str | None = Query(default=None),  # noqa: A002
    url: str | None = Query(default=None),
) -> Response:
    """Resolve a provider embed to its innermost player and render it."""
    state = cast(AppState, request.app.state)
    segments = [s for s in route.split("/") if s]

    try:
        target = _parse_proxy_route(segments, url)
        resolved = await state.resolve_stream_uc.execute(target)
    except InvalidStreamTargetError as e:
        log.info("proxy_bad_request", path=request.url.path, error=str(e))
        return render_error(400, str(e))
    except UnknownProviderError as e:
        log.info("proxy_unknown_provider", slug=e.slug)
        return render_error(502, str(e))
    except Exception as e:
        log.error("proxy_request_failed", path=request.url.path, exc_info=True)
        return render_error(502, str(e))

    return render_resolved(resolved, parse_format(format))
