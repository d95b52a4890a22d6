"""Event delivery: the POST side of the webhook endpoint."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Callable

from .broadcast import BroadcastError
from .errors import UpstreamError
from .models import HandlerResponse, InboundRequest
from .webhook import (
    MESSAGE_TYPE_HEADER,
    MESSAGE_TYPE_REVOCATION,
    MESSAGE_TYPE_VERIFICATION,
    SUBSCRIPTION_TYPE_HEADER,
    verify_request,
)

if TYPE_CHECKING:
    from .handler import Services

logger = logging.getLogger(__name__)


def _passthrough(payload: Any) -> Any:
    return payload


# Subscription type -> transform applied before broadcasting.
TRANSFORMS: dict[str, Callable[[Any], Any]] = {
    "channel.follow": _passthrough,
}


def parse_body(body: bytes) -> Any:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UpstreamError(f"Body is not valid UTF-8: {exc}") from exc
    try:
        return json.loads(text)
    except ValueError as exc:
        raise UpstreamError(f"Invalid JSON body: {exc}") from exc


async def handle_event(request: InboundRequest, services: "Services") -> HandlerResponse:
    """Verify, parse and route one EventSub delivery.

    Raises:
        AuthError: Signature did not verify.
        UpstreamError: Body is not JSON, or the broadcast publish failed.
    """
    verify_request(request, services.settings.webhook_secret)
    await services.debug.emit(
        "event",
        {"headers": dict(request.headers), "body": request.body.decode("utf-8", errors="replace")},
    )

    payload = parse_body(request.body)
    message_type = request.header(MESSAGE_TYPE_HEADER)

    if message_type == MESSAGE_TYPE_VERIFICATION:
        challenge = payload.get("challenge") if isinstance(payload, dict) else None
        if not isinstance(challenge, str):
            raise UpstreamError("Verification request carried no challenge")
        await services.debug.emit("challenge", payload)
        return HandlerResponse.text(challenge)

    if message_type == MESSAGE_TYPE_REVOCATION:
        subscription = (payload.get("subscription") if isinstance(payload, dict) else None) or {}
        logger.warning(
            "Subscription %s (%s) revoked: %s",
            subscription.get("id"),
            subscription.get("type"),
            subscription.get("status"),
        )
        await services.debug.emit("revocation", payload)
        return HandlerResponse.text("")

    subscription_type = request.header(SUBSCRIPTION_TYPE_HEADER)
    transform = TRANSFORMS.get(subscription_type)
    if transform is None:
        logger.debug("Ignoring unsupported subscription type %r", subscription_type)
        return HandlerResponse.text("")

    try:
        await services.broadcaster.publish(
            services.settings.channel_id, subscription_type, transform(payload)
        )
    except BroadcastError as exc:
        raise UpstreamError(f"Failed to broadcast {subscription_type}: {exc}") from exc
    return HandlerResponse.text("")
