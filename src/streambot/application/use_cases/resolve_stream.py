"""Resolve-stream use case.

Proxy target -> embed URL (or supplied direct URL) -> unwrapped player URL.
"""

from __future__ import annotations

import re
import time

import structlog

from streambot.application.link_composer import LinkComposer
from streambot.domain.entities import ResolvedUrl, StreamTarget
from streambot.domain.ports import IframeUnwrapperPort, ProviderRegistryPort

log = structlog.get_logger(__name__)

_DIRECT_MEDIA_RE = re.compile(r"\.(m3u8|mp4|webm|mkv)(\?|$)", re.IGNORECASE)


def is_direct_media_url(url: str) -> bool:
    """True for URLs that already point at a playable media file or playlist."""
    return bool(_DIRECT_MEDIA_RE.search(url))


class ResolveStreamUseCase:
    def __init__(
        self,
        *,
        registry: ProviderRegistryPort,
        composer: LinkComposer,
        unwrapper: IframeUnwrapperPort,
    ) -> None:
        self._registry = registry
        self._composer = composer
        self._unwrapper = unwrapper

    async def execute(self, target: StreamTarget) -> ResolvedUrl:
        """Resolve *target* to the innermost player URL.

        Raises:
            UnknownProviderError: The slug is not registered.
            InvalidStreamTargetError: The target cannot be turned into an
                embed URL for its provider.
        """
        if target.direct_url:
            if is_direct_media_url(target.direct_url):
                log.info(
                    "direct_media_passthrough",
                    provider=target.provider_slug,
                    url=target.direct_url,
                )
                return target.direct_url
            start = time.perf_counter_ns()
            resolved = await self._unwrapper.unwrap(target.direct_url)
            self._log_resolved(target, target.direct_url, resolved, start)
            return resolved

        provider = self._registry.find_by_slug(target.provider_slug)
        embed_url = self._composer.build_embed_url(provider, target)

        start = time.perf_counter_ns()
        resolved = await self._unwrapper.unwrap(embed_url)
        self._log_resolved(target, embed_url, resolved, start)
        return resolved

    @staticmethod
    def _log_resolved(
        target: StreamTarget, source: str, resolved: str, start_ns: int
    ) -> None:
        log.info(
            "stream_resolved",
            provider=target.provider_slug,
            media_type=target.media_type,
            source=source,
            resolved=resolved,
            unwrapped=resolved != source,
            duration_ms=(time.perf_counter_ns() - start_ns) // 1_000_000,
        )
