"""FastAPI HTTP server for the command gateway.

Every GET (or HEAD) request is converted into a :class:`RequestInfo` and handed to
the dispatcher, which decides the status and plain-text body:

    GET /          -> 200, empty body
    GET /metrics   -> 200, fixed counter text
    GET /<route>   -> runs the route's command (200 OK / 500 ERR)
    GET /<other>   -> 404
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from spuria import __version__
from spuria.config.settings import Settings
from spuria.domain.models import RequestInfo
from spuria.gateway.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def request_info(request: Request) -> RequestInfo:
    """Snapshot the parts of a Starlette request the dispatcher uses."""
    client = request.client
    headers = request.headers
    return RequestInfo(
        method=request.method,
        path=request.scope["path"],
        query=tuple(request.query_params.multi_items()),
        client_host=client.host if client else None,
        client_port=client.port if client else None,
        proto=f"HTTP/{request.scope.get('http_version', '1.1')}",
        host=headers.get("host", ""),
        referer=headers.get("referer", ""),
        user_agent=headers.get("user-agent", ""),
    )


def create_app(dispatcher: Dispatcher) -> FastAPI:
    """Create the gateway application around a ready dispatcher."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Gateway started (%d routes)", len(app.state.dispatcher.routes))
        yield
        logger.info("Gateway stopped")

    app = FastAPI(
        title="spuria",
        description="Runs pre-registered shell commands on HTTP GET",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.dispatcher = dispatcher

    @app.api_route("/{path:path}", methods=["GET", "HEAD"], include_in_schema=False)
    async def dispatch(request: Request) -> Response:
        d: Dispatcher = app.state.dispatcher
        result = await d.dispatch(request_info(request))
        if result is None:
            return Response()
        return PlainTextResponse(
            content=result.body,
            status_code=result.status_code,
            media_type=result.content_type,
        )

    return app


def serve(settings: Settings, dispatcher: Dispatcher) -> None:
    """Run the gateway with uvicorn until interrupted."""
    app = create_app(dispatcher)
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
        access_log=False,
    )
