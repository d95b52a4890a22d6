"""Subscription management: the GET side of the webhook endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from .errors import ClientError, UpstreamError
from .helix import HelixError, Subscription
from .models import HandlerResponse

if TYPE_CHECKING:
    from .handler import Services

logger = logging.getLogger(__name__)

SUBSCRIBE = "subscribe"
UNSUBSCRIBE = "unsubscribe"
ACTIONS = (SUBSCRIBE, UNSUBSCRIBE)


@dataclass(frozen=True)
class EventType:
    version: str
    condition: Callable[[str], dict[str, Any]]


def _follow_condition(channel_id: str) -> dict[str, Any]:
    # v2 requires a moderator; the broadcaster moderates their own channel
    return {"broadcaster_user_id": channel_id, "moderator_user_id": channel_id}


SUPPORTED_EVENT_TYPES: dict[str, EventType] = {
    "channel.follow": EventType(version="2", condition=_follow_condition),
}


def validate(action: str | None, event_type: str | None) -> None:
    if action not in ACTIONS:
        raise ClientError(f'Invalid action "{action}". Valid actions: {", ".join(ACTIONS)}')
    if event_type not in SUPPORTED_EVENT_TYPES:
        raise ClientError(
            f'Invalid type "{event_type}". Valid types: {", ".join(SUPPORTED_EVENT_TYPES)}'
        )


def find_subscription(subs: list[Subscription], event_type: str) -> Subscription | None:
    return next((s for s in subs if s.type == event_type), None)


async def handle_subscription_request(
    action: str | None,
    event_type: str | None,
    callback_url: str,
    services: "Services",
) -> HandlerResponse:
    """Subscribe to or unsubscribe from an EventSub type.

    Raises:
        ClientError: Invalid action/type, or already in the requested state.
        UpstreamError: Any Helix call failed.
    """
    validate(action, event_type)
    assert event_type is not None
    helix = services.helix
    debug = services.debug

    try:
        subs = await helix.list_subscriptions()
    except HelixError as exc:
        raise UpstreamError(f"Failed to fetch subscriptions: {exc.detail}") from exc
    await debug.emit("subscriptions", [s.to_dict() for s in subs])

    existing = find_subscription(subs, event_type)

    if action == SUBSCRIBE and existing is None:
        entry = SUPPORTED_EVENT_TYPES[event_type]
        try:
            created = await helix.create_subscription(
                type=event_type,
                version=entry.version,
                condition=entry.condition(services.settings.channel_id),
                callback=callback_url,
                secret=services.settings.webhook_secret,
            )
        except HelixError as exc:
            raise UpstreamError(f"Failed to create subscription: {exc.detail}") from exc
        logger.info("Subscribed to %s (id=%s) at %s", event_type, created.id, callback_url)
        await debug.emit("subscribe", created.to_dict())
        return HandlerResponse.json(created.to_dict())

    if action == UNSUBSCRIBE and existing is not None:
        try:
            await helix.delete_subscription(existing.id)
        except HelixError as exc:
            raise UpstreamError(f"Failed to delete subscription: {exc.detail}") from exc
        logger.info("Unsubscribed from %s (id=%s)", event_type, existing.id)
        await debug.emit("unsubscribe", existing.to_dict())
        return HandlerResponse.json(existing.to_dict())

    raise ClientError("Request failed.")
