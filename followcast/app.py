"""
followcast webhook receiver (FastAPI)

Start: uvicorn followcast.app:create_app --factory --port 3001
Subscribe: curl "http://localhost:3001/webhook?action=subscribe&type=channel.follow"
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, Response

from . import __version__
from .config import Settings
from .handler import Services, handle
from .models import InboundRequest

log = logging.getLogger(__name__)


def create_app(services: Services | None = None) -> FastAPI:
    """Build the app. Services default to ones built from the environment."""
    if services is None:
        settings = Settings.from_env()
        logging.basicConfig(level=settings.log_level)
        services = Services.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await services.aclose()

    app = FastAPI(title="followcast webhook receiver", version=__version__, lifespan=lifespan)
    app.state.services = services

    # handle() answers 405 for anything but GET and POST
    @app.api_route("/webhook", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    async def webhook(request: Request) -> Response:
        inbound = InboundRequest.build(
            method=request.method,
            headers=request.headers,
            body=await request.body(),
            query=request.query_params,
            url=str(request.url),
        )
        result = await handle(inbound, services)
        log.debug("%s /webhook -> %s", request.method, result.status_code)
        return Response(
            content=result.body,
            status_code=result.status_code,
            media_type=result.content_type,
        )

    @app.get("/healthz")
    async def healthz():
        return "ok"

    return app
