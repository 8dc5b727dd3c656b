"""Proxy response presenter.

Renders a resolved player URL in the format the caller asked for:
a JSON body, a 302 redirect, or (default) a fullscreen HTML player page
that embeds the URL in a single iframe.
"""

from __future__ import annotations

import html
from typing import Literal

from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from starlette.responses import Response

ResponseFormat = Literal["json", "redirect", "html"]

_PLAYER_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0, maximum-scale=1.0, user-scalable=no">
    <meta name="mobile-web-app-capable" content="yes">
    <title>Streaming Player</title>
    <style>
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}
        html, body {{ width: 100%; height: 100%; overflow: hidden; background: #000; }}
        #player-container {{ position: fixed; inset: 0; width: 100%; height: 100%; z-index: 1; }}
        #player {{ width: 100%; height: 100%; border: none; display: block; }}
        #player-container:fullscreen,
        #player-container:-webkit-full-screen {{ width: 100%; height: 100%; }}
    </style>
</head>
<body>
    <div id="player-container">
        <iframe
            id="player"
            src="{src}"
            allow="autoplay; encrypted-media; fullscreen; picture-in-picture; web-share"
            allowfullscreen
            webkitallowfullscreen
            mozallowfullscreen
            scrolling="no"
            frameborder="0"
            referrerpolicy="no-referrer-when-downgrade">
        </iframe>
    </div>
    <script>
        const container = document.getElementById('player-container');

        function requestFullscreen() {{
            if (container.requestFullscreen) {{
                container.requestFullscreen().catch(() => {{}});
            }} else if (container.webkitRequestFullscreen) {{
                container.webkitRequestFullscreen();
            }}
        }}

        window.addEventListener('message', function (event) {{
            const data = event.data;
            if (data === 'requestFullscreen' || (data && data.type === 'requestFullscreen')) {{
                requestFullscreen();
            }}
        }});
    </script>
</body>
</html>
"""


def parse_format(raw: str | None) -> ResponseFormat:
    """Unknown or missing values fall back to ``html``."""
    if raw in ("json", "redirect"):
        return raw  # type: ignore[return-value]
    return "html"


def render_player_html(stream_url: str) -> str:
    return _PLAYER_TEMPLATE.format(src=html.escape(stream_url, quote=True))


def render_resolved(stream_url: str, fmt: ResponseFormat) -> Response:
    """Build the HTTP response for a resolved player URL."""
    if fmt == "json":
        return JSONResponse(content={"url": stream_url})
    if fmt == "redirect":
        return RedirectResponse(url=stream_url, status_code=302)
    return HTMLResponse(
        content=render_player_html(stream_url),
        headers={"X-Frame-Options": "SAMEORIGIN"},
    )


def render_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})
