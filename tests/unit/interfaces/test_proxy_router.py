"""Tests for the proxy router and application-level HTTP behavior."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from streambot.domain.entities import StreamTarget
from streambot.domain.exceptions import InvalidStreamTargetError, UnknownProviderError
from streambot.infrastructure.config import AppConfig
from streambot.interfaces.api.proxy.presenter import parse_format, render_player_html
from streambot.interfaces.api.proxy.router import _parse_proxy_route
from streambot.interfaces.app import create_app

_RESOLVED = "https://player.example/e/abc"


def _make_app(resolve_stream_uc: AsyncMock | None = None) -> FastAPI:
    """Create the app without running lifespan; the use case is injected."""
    app = create_app(AppConfig())
    if resolve_stream_uc is None:
        resolve_stream_uc = AsyncMock()
        resolve_stream_uc.execute.return_value = _RESOLVED
    app.state.resolve_stream_uc = resolve_stream_uc
    return app


@pytest.fixture()
def uc() -> AsyncMock:
    mock = AsyncMock()
    mock.execute.return_value = _RESOLVED
    return mock


@pytest.fixture()
def client(uc: AsyncMock) -> TestClient:
    return TestClient(_make_app(uc))


# ---------------------------------------------------------------------------
# Route parsing
# ---------------------------------------------------------------------------


class TestParseProxyRoute:
    def test_movie(self) -> None:
        assert _parse_proxy_route(["vidsrc", "movie", "603"], None) == StreamTarget(
            provider_slug="vidsrc", media_type="movie", tmdb_id=603
        )

    def test_tv(self) -> None:
        target = _parse_proxy_route(["vidsrc", "tv", "1396", "2", "5"], None)
        assert (target.tmdb_id, target.season, target.episode) == (1396, 2, 5)

    @pytest.mark.parametrize("segments", [[], ["vidsrc"]])
    def test_missing_slug_or_type(self, segments: list[str]) -> None:
        with pytest.raises(InvalidStreamTargetError, match="Invalid proxy route"):
            _parse_proxy_route(segments, None)

    @pytest.mark.parametrize(
        "segments",
        [
            ["vidsrc", "movie"],
            ["vidsrc", "movie", "abc"],
            ["vidsrc", "movie", "0"],
            ["vidsrc", "movie", "-3"],
            ["vidsrc", "movie", "\u00b2"],
            ["vidsrc", "tv", "1396", "1", "\u0663"],
            ["vidsrc", "movie", "603", "extra"],
            ["vidsrc", "tv", "1396"],
            ["vidsrc", "tv", "1396", "1"],
            ["vidsrc", "tv", "1396", "x", "1"],
            ["vidsrc", "tv", "1396", "1", "1", "1"],
        ],
    )
    def test_malformed_ids(self, segments: list[str]) -> None:
        with pytest.raises(InvalidStreamTargetError):
            _parse_proxy_route(segments, None)

    def test_unsupported_media_type(self) -> None:
        with pytest.raises(InvalidStreamTargetError, match="Unsupported media type"):
            _parse_proxy_route(["vidsrc", "anime", "1"], None)

    def test_direct_url_bypasses_ids(self) -> None:
        target = _parse_proxy_route(["cinetaro", "tv"], "https://cdn.example/a.m3u8")
        assert target.direct_url == "https://cdn.example/a.m3u8"
        assert target.media_type == "tv"
        assert target.tmdb_id is None

    def test_direct_url_with_unknown_type(self) -> None:
        target = _parse_proxy_route(["cinetaro", "x"], "https://cdn.example/a")
        assert target.media_type is None


class TestParseFormat:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("json", "json"),
            ("redirect", "redirect"),
            ("html", "html"),
            (None, "html"),
            ("xml", "html"),
        ],
    )
    def test_values(self, raw: str | None, expected: str) -> None:
        assert parse_format(raw) == expected


# ---------------------------------------------------------------------------
# Format negotiation
# ---------------------------------------------------------------------------


class TestFormats:
    def test_json(self, client: TestClient, uc: AsyncMock) -> None:
        resp = client.get("/proxy/vidsrc/movie/603?format=json")

        assert resp.status_code == 200
        assert resp.json() == {"url": _RESOLVED}
        uc.execute.assert_awaited_once_with(
            StreamTarget(provider_slug="vidsrc", media_type="movie", tmdb_id=603)
        )

    def test_redirect(self, client: TestClient) -> None:
        resp = client.get(
            "/proxy/vidsrc/movie/603?format=redirect", follow_redirects=False
        )

        assert resp.status_code == 302
        assert resp.headers["location"] == _RESOLVED

    def test_html_default(self, client: TestClient) -> None:
        resp = client.get("/proxy/vidsrc/tv/1396/1/1")

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "text/html; charset=utf-8"
        assert resp.headers["x-frame-options"] == "SAMEORIGIN"
        assert f'src="{_RESOLVED}"' in resp.text
        assert "requestFullscreen" in resp.text

    def test_unknown_format_falls_back_to_html(self, client: TestClient) -> None:
        resp = client.get("/proxy/vidsrc/movie/603?format=xml")

        assert resp.headers["content-type"].startswith("text/html")

    def test_direct_url_query_decoded_once(
        self, client: TestClient, uc: AsyncMock
    ) -> None:
        resp = client.get(
            "/proxy/cinetaro/tv",
            params={"url": "https://cdn.example/a.m3u8?sig=a%2Fb", "format": "json"},
        )

        assert resp.status_code == 200
        target = uc.execute.await_args.args[0]
        assert target.direct_url == "https://cdn.example/a.m3u8?sig=a%2Fb"


class TestPlayerHtml:
    def test_src_is_escaped(self) -> None:
        page = render_player_html('https://x.example/"><script>alert(1)</script>')
        assert "<script>alert(1)</script>" not in page
        assert "&quot;&gt;&lt;script&gt;" in page


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_unknown_provider_is_502(self, uc: AsyncMock) -> None:
        uc.execute.side_effect = UnknownProviderError("nope")
        client = TestClient(_make_app(uc))

        resp = client.get("/proxy/nope/movie/603?format=json")

        assert resp.status_code == 502
        assert resp.json() == {"error": "Unsupported provider: nope"}

    def test_client_error_from_use_case_is_400(self, uc: AsyncMock) -> None:
        uc.execute.side_effect = InvalidStreamTargetError("does not serve movie")
        client = TestClient(_make_app(uc))

        resp = client.get("/proxy/tvonly/movie/603")

        assert resp.status_code == 400
        assert resp.json() == {"error": "does not serve movie"}

    def test_unexpected_error_is_502(self, uc: AsyncMock) -> None:
        uc.execute.side_effect = RuntimeError("boom")
        client = TestClient(_make_app(uc))

        resp = client.get("/proxy/vidsrc/movie/603")

        assert resp.status_code == 502
        assert resp.json() == {"error": "boom"}

    @pytest.mark.parametrize(
        ("path", "message"),
        [
            ("/proxy", "Invalid proxy route"),
            ("/proxy/vidsrc", "Invalid proxy route"),
            ("/proxy/vidsrc/movie", "TMDB ID required"),
            ("/proxy/vidsrc/tv/1396", "TMDB ID, season, and episode required"),
            ("/proxy/vidsrc/anime/1", "Unsupported media type"),
        ],
    )
    def test_bad_routes_are_400(
        self, client: TestClient, uc: AsyncMock, path: str, message: str
    ) -> None:
        resp = client.get(path)

        assert resp.status_code == 400
        assert resp.json() == {"error": message}
        uc.execute.assert_not_awaited()

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH"])
    def test_non_get_is_405(self, client: TestClient, method: str) -> None:
        resp = client.request(method, "/proxy/vidsrc/movie/603")

        assert resp.status_code == 405
        assert resp.json() == {"error": "Method not allowed"}

    def test_unknown_path_is_404(self, client: TestClient) -> None:
        resp = client.get("/movies/603")

        assert resp.status_code == 404
        assert resp.json() == {"error": "Not found"}


class TestHealth:
    @pytest.mark.parametrize("path", ["/", "/health"])
    def test_ok(self, client: TestClient, path: str) -> None:
        resp = client.get(path)

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}
