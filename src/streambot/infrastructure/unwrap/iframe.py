"""Iframe unwrapper: follow nested embed wrappers down to the real player.

Provider embed pages usually wrap the player in one or more ad-laden
iframes. Each page is fetched and the first ``<iframe src=...>`` is
followed until a page has none, the depth ceiling is reached, or a fetch
fails.

Only the first iframe of each page is followed (regex match, not a full
HTML parse). A fetch failure never raises; the caller gets the best URL
known so far.
"""

from __future__ import annotations

import re
from urllib.parse import urljoin

import httpx
import structlog

log = structlog.get_logger(__name__)

# Depth index of the last page that may be returned (pages 0..3)
MAX_IFRAME_DEPTH = 3
DEFAULT_UNWRAP_TIMEOUT = 8.0

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

_IFRAME_SRC_RE = re.compile(r"""<iframe[^>]+src=["']([^"']+)["']""", re.IGNORECASE)


def find_iframe_src(html: str) -> str | None:
    """Return the ``src`` of the first iframe in *html*, or None."""
    match = _IFRAME_SRC_RE.search(html)
    return match.group(1) if match else None


class IframeUnwrapper:
    """Resolves an embed URL to its innermost iframe target.

    Implements ``IframeUnwrapperPort``. Stateless apart from the shared
    HTTP client, so one instance serves all concurrent requests.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        timeout: float = DEFAULT_UNWRAP_TIMEOUT,
        max_depth: int = MAX_IFRAME_DEPTH,
        user_agent: str = BROWSER_USER_AGENT,
    ) -> None:
        self._http = http_client
        self._timeout = timeout
        self._max_depth = max_depth
        self._user_agent = user_agent

    async def _fetch_html(self, url: str) -> str:
        resp = await self._http.get(
            url,
            headers={"User-Agent": self._user_agent, "Referer": url},
            timeout=self._timeout,
            follow_redirects=True,
        )
        resp.raise_for_status()
        return resp.text

    async def unwrap(self, url: str) -> str:
        """Follow nested iframes starting at *url*.

        The URL at depth ``max_depth`` is returned without being fetched, so
        a chain of N pages yields page ``min(N, max_depth + 1)``.
        """
        current = url
        # The page at max_depth is returned, never fetched.
        for depth in range(self._max_depth):
            try:
                html = await self._fetch_html(current)
                src = find_iframe_src(html)
                if src is None:
                    log.debug("iframe_terminal_page", depth=depth, url=current)
                    return current
                next_url = urljoin(current, src)
            except (
                httpx.HTTPError,
                httpx.InvalidURL,
                UnicodeDecodeError,
                ValueError,
            ) as exc:
                log.warning(
                    "iframe_fetch_failed",
                    depth=depth,
                    url=current,
                    error=type(exc).__name__,
                    detail=str(exc),
                )
                return current

            current = next_url
            log.debug("iframe_found", depth=depth, next_url=current)

        log.info("iframe_max_depth_reached", depth=self._max_depth, url=current)
        return current
