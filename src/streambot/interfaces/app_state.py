"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from streambot.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from streambot.application.link_composer import LinkComposer
    from streambot.application.use_cases import ResolveStreamUseCase
    from streambot.domain.ports import (
        CachePort,
        IdMappingPort,
        IframeUnwrapperPort,
        MetadataPort,
        ProviderRegistryPort,
    )


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient
    http_transport: httpx.AsyncBaseTransport | None

    # Domain Ports
    provider_registry: ProviderRegistryPort
    unwrapper: IframeUnwrapperPort

    # Metadata / id mapping (TMDB client optional, requires API key)
    tmdb_client: MetadataPort | None
    anilist_client: IdMappingPort

    # Application Services
    link_composer: LinkComposer
    resolve_stream_uc: ResolveStreamUseCase
