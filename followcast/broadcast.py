"""Pusher broadcast publisher."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import pusher
from pusher.errors import PusherError

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)


class BroadcastError(Exception):
    """Raised when a publish to Pusher fails."""


class Broadcaster:
    """Publishes events to Pusher channels.

    ``pusher.Pusher.trigger`` is blocking, so each publish runs in the
    default executor.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Broadcaster":
        return cls(
            pusher.Pusher(
                app_id=settings.pusher_app_id,
                key=settings.pusher_key,
                secret=settings.pusher_secret,
                cluster=settings.pusher_cluster,
                ssl=True,
            )
        )

    async def publish(self, channel: str, event: str, data: Any) -> None:
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, self._client.trigger, channel, event, data)
        except (PusherError, ValueError, OSError) as exc:
            # requests' transport errors are OSError subclasses
            logger.error("Pusher publish to %s/%s failed: %s", channel, event, exc)
            raise BroadcastError(str(exc)) from exc
        logger.debug("Published %s to channel %s", event, channel)
