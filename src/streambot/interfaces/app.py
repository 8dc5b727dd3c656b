"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from streambot.infrastructure.config import AppConfig
from streambot.interfaces.api.proxy.router import router as proxy_router
from streambot.interfaces.app_state import AppState
from streambot.interfaces.composition import lifespan

log = structlog.get_logger(__name__)

_ERROR_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


def create_app(
    config: AppConfig,
    *,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create the FastAPI app: configuration ONLY, NO resource initialization.

    Resources (HTTP client, cache, registry) are created in lifespan().
    *http_transport* replaces the network transport of the shared client.
    """
    app = FastAPI(
        title="StreamBot Proxy",
        description="Iframe-unwrapping stream proxy",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config
    app.state.http_transport = http_transport

    app.include_router(proxy_router)

    @app.get("/")
    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> Response:
        message = _ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.middleware("http")
    async def only_get(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method != "GET":
            return JSONResponse(
                status_code=405, content={"error": _ERROR_MESSAGES[405]}
            )
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = getattr(locals().get("response", None), "status_code", 500)

            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
