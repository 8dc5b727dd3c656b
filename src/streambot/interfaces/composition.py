"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from streambot.application.link_composer import LinkComposer
from streambot.application.use_cases import ResolveStreamUseCase
from streambot.infrastructure.anilist.client import HttpxAnilistClient
from streambot.infrastructure.cache import DiskcacheAdapter
from streambot.infrastructure.providers import (
    BUILTIN_PROVIDERS,
    merge_providers,
    parse_extra_providers,
)
from streambot.infrastructure.tmdb.client import HttpxTmdbClient
from streambot.infrastructure.unwrap import IframeUnwrapper
from streambot.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Cache (required by the lookup clients)
        2. HTTP Client (shared by unwrapper and lookup clients)
        3. Provider Registry
        4. Iframe unwrapper
        5. TMDB / AniList clients
        6. Link composer + resolve-stream use case
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Cache
    cache = DiskcacheAdapter(
        directory=config.cache_dir,
        ttl_seconds=config.cache_ttl_seconds,
    )
    await cache.__aenter__()
    state.cache = cache
    log.info("cache_initialized", directory=str(config.cache_dir))

    if config.environment == "dev":
        await cache.clear()
        log.debug("cache_cleared", environment="dev")

    # 2) HTTP client (transport is only preset by tests)
    state.http_client = httpx.AsyncClient(
        transport=getattr(state, "http_transport", None),
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 3) Provider registry (built-ins + anime providers from config)
    extras = parse_extra_providers(config.anime_providers)
    state.provider_registry = merge_providers(BUILTIN_PROVIDERS, extras)
    log.info(
        "provider_registry_initialized",
        providers=state.provider_registry.slugs,
    )

    # 4) Iframe unwrapper
    state.unwrapper = IframeUnwrapper(
        state.http_client,
        timeout=config.http_unwrap_timeout_seconds,
    )

    # 5) Metadata + id mapping (TMDB optional, requires API key)
    if config.tmdb_api_key:
        state.tmdb_client = HttpxTmdbClient(
            api_key=config.tmdb_api_key,
            http_client=state.http_client,
            cache=state.cache,
        )
        log.info("tmdb_client_initialized")
    else:
        state.tmdb_client = None
        log.info("tmdb_client_disabled", reason="no API key")

    state.anilist_client = HttpxAnilistClient(
        http_client=state.http_client,
        cache=state.cache,
        endpoint=config.anilist_endpoint,
    )

    # 6) Link composer + use case
    state.link_composer = LinkComposer(
        state.provider_registry,
        proxy_enabled=config.proxy_enabled,
        public_base_url=config.proxy_public_base_url or "",
        metadata=state.tmdb_client,
        id_mapping=state.anilist_client,
    )
    state.resolve_stream_uc = ResolveStreamUseCase(
        registry=state.provider_registry,
        composer=state.link_composer,
        unwrapper=state.unwrapper,
    )

    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
