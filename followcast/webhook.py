"""Twitch EventSub webhook verification helpers.

Usage:
    from followcast.webhook import verify_request
    from followcast.errors import AuthError

    try:
        verify_request(request, secret)
    except AuthError:
        return HandlerResponse.text("Verification failed.", status_code=403)
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from .errors import AuthError
from .models import InboundRequest

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Twitch-Eventsub-Message-Signature"
MESSAGE_ID_HEADER = "Twitch-Eventsub-Message-Id"
TIMESTAMP_HEADER = "Twitch-Eventsub-Message-Timestamp"
MESSAGE_TYPE_HEADER = "Twitch-Eventsub-Message-Type"
SUBSCRIPTION_TYPE_HEADER = "Twitch-Eventsub-Subscription-Type"

MESSAGE_TYPE_VERIFICATION = "webhook_callback_verification"
MESSAGE_TYPE_NOTIFICATION = "notification"
MESSAGE_TYPE_REVOCATION = "revocation"

SIGNATURE_PREFIX = "sha256="


def signing_message(message_id: str, timestamp: str, body: bytes | str) -> bytes:
    """Canonical signing input: ``message_id + timestamp + body`` as bytes."""
    if isinstance(body, str):
        body = body.encode()
    return message_id.encode() + timestamp.encode() + body


def compute_signature(secret: str, message: bytes | str) -> str:
    if isinstance(message, str):
        message = message.encode()
    digest = hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(expected: str | None, secret: str, message: bytes | str) -> bool:
    """Return True when ``expected`` matches the HMAC of ``message``.

    Both sides are compared as UTF-8 bytes so arbitrary header values never
    raise, and the comparison runs in constant time.
    """
    if not expected:
        return False
    calculated = compute_signature(secret, message)
    return hmac.compare_digest(expected.encode(), calculated.encode())


def verify_request(request: InboundRequest, secret: str) -> None:
    """Verify an EventSub delivery.

    Raises:
        AuthError: Signature missing or does not match.
    """
    message = signing_message(
        request.header(MESSAGE_ID_HEADER),
        request.header(TIMESTAMP_HEADER),
        request.body,
    )
    if not verify_signature(request.header(SIGNATURE_HEADER), secret, message):
        logger.warning(
            "Signature mismatch for message %s",
            request.header(MESSAGE_ID_HEADER) or "<missing id>",
        )
        raise AuthError()
