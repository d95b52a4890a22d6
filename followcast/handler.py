"""Method-dispatched entry point shared by every hosting adapter."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .broadcast import Broadcaster
from .config import Settings
from .debug import DebugSink
from .dispatch import handle_event
from .errors import FollowcastError
from .helix import HelixClient
from .models import HandlerResponse, InboundRequest
from .subscriptions import handle_subscription_request

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Collaborators built once per process and passed into every request."""

    settings: Settings
    helix: HelixClient
    broadcaster: Broadcaster
    debug: DebugSink

    @classmethod
    def from_settings(cls, settings: Settings) -> "Services":
        broadcaster = Broadcaster.from_settings(settings)
        return cls(
            settings=settings,
            helix=HelixClient(
                settings.twitch_client_id,
                settings.twitch_client_secret,
                base_url=settings.helix_url,
                auth_url=settings.auth_url,
            ),
            broadcaster=broadcaster,
            debug=DebugSink(broadcaster, enabled=settings.debug),
        )

    async def aclose(self) -> None:
        await self.helix.aclose()


def callback_url_for(request: InboundRequest, settings: Settings) -> str:
    if settings.callback_url:
        return settings.callback_url
    return request.url.split("?", 1)[0]


async def handle(request: InboundRequest, services: Services) -> HandlerResponse:
    """Route GET to subscription management and POST to event delivery."""
    try:
        if request.method == "GET":
            return await handle_subscription_request(
                request.query.get("action"),
                request.query.get("type"),
                callback_url_for(request, services.settings),
                services,
            )
        if request.method == "POST":
            return await handle_event(request, services)
    except FollowcastError as exc:
        logger.info("%s %s -> %s: %s", request.method, request.url, exc.status_code, exc.message)
        return HandlerResponse.text(exc.message, status_code=exc.status_code)
    return HandlerResponse.text("Method not allowed.", status_code=405)
