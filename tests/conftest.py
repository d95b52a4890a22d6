"""Shared fixtures and fakes for followcast tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from followcast.config import Settings
from followcast.debug import DebugSink
from followcast.handler import Services
from followcast.helix import HelixError, Subscription
from followcast.models import InboundRequest
from followcast.webhook import compute_signature, signing_message

WEBHOOK_SECRET = "test-webhook-secret-1234567890"
CHANNEL_ID = "141981764"


class FakeHelix:
    """Records calls; returns canned subscriptions."""

    def __init__(self, subscriptions: list[Subscription] | None = None) -> None:
        self.subscriptions = list(subscriptions or [])
        self.fail_on: set[str] = set()
        self.created: list[dict[str, Any]] = []
        self.deleted: list[str] = []
        self.closed = False

    async def list_subscriptions(self, status: str | None = "enabled") -> list[Subscription]:
        if "list" in self.fail_on:
            raise HelixError("connection refused")
        return list(self.subscriptions)

    async def create_subscription(self, type, version, condition, callback, secret) -> Subscription:
        if "create" in self.fail_on:
            raise HelixError("forbidden", 403)
        self.created.append(
            {"type": type, "version": version, "condition": condition, "callback": callback, "secret": secret}
        )
        return Subscription(
            id="f1c2a387-161a-49f9-a165-0f21d7a4e1c4",
            type=type,
            version=version,
            status="webhook_callback_verification_pending",
            condition=condition,
            callback=callback,
            created_at="2026-10-19T00:00:00Z",
        )

    async def delete_subscription(self, id: str) -> None:
        if "delete" in self.fail_on:
            raise HelixError("not found", 404)
        self.deleted.append(id)

    async def aclose(self) -> None:
        self.closed = True


class FakeBroadcaster:
    def __init__(self) -> None:
        self.published: list[tuple[str, str, Any]] = []
        self.error: Exception | None = None

    async def publish(self, channel: str, event: str, data: Any) -> None:
        if self.error is not None:
            raise self.error
        self.published.append((channel, event, data))


def make_subscription(type: str = "channel.follow", id: str = "sub-1") -> Subscription:
    return Subscription(
        id=id,
        type=type,
        version="2",
        status="enabled",
        condition={"broadcaster_user_id": CHANNEL_ID, "moderator_user_id": CHANNEL_ID},
        callback="https://example.com/webhook",
        created_at="2026-10-01T12:00:00Z",
    )


def signed_post(
    body: bytes | str,
    *,
    message_type: str = "notification",
    subscription_type: str = "channel.follow",
    secret: str = WEBHOOK_SECRET,
    message_id: str = "befa7b53-d79d-478f-86b9-120f112b044e",
    timestamp: str = "2026-10-19T10:11:12.123Z",
) -> dict[str, str]:
    """Headers for a correctly signed EventSub delivery of ``body``."""
    return {
        "Twitch-Eventsub-Message-Id": message_id,
        "Twitch-Eventsub-Message-Timestamp": timestamp,
        "Twitch-Eventsub-Message-Signature": compute_signature(
            secret, signing_message(message_id, timestamp, body)
        ),
        "Twitch-Eventsub-Message-Type": message_type,
        "Twitch-Eventsub-Subscription-Type": subscription_type,
    }


def post_request(body: bytes | str, headers: dict[str, str]) -> InboundRequest:
    return InboundRequest.build("POST", headers, body, url="https://example.com/webhook")


def get_request(**query: str) -> InboundRequest:
    return InboundRequest.build(
        "GET", {}, b"", query=query, url="https://example.com/webhook?" + "&".join(f"{k}={v}" for k, v in query.items())
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        pusher_app_id="123456",
        pusher_key="key",
        pusher_secret="pusher-secret",
        pusher_cluster="eu",
        twitch_client_id="client-id",
        twitch_client_secret="client-secret",
        webhook_secret=WEBHOOK_SECRET,
        channel_id=CHANNEL_ID,
    )


@pytest.fixture
def helix() -> FakeHelix:
    return FakeHelix()


@pytest.fixture
def broadcaster() -> FakeBroadcaster:
    return FakeBroadcaster()


@pytest.fixture
def services(settings, helix, broadcaster) -> Services:
    return Services(
        settings=settings,
        helix=helix,
        broadcaster=broadcaster,
        debug=DebugSink(broadcaster, enabled=False),
    )


@pytest.fixture
def follow_payload() -> dict[str, Any]:
    return {
        "subscription": {
            "id": "f1c2a387-161a-49f9-a165-0f21d7a4e1c4",
            "type": "channel.follow",
            "version": "2",
            "status": "enabled",
            "condition": {"broadcaster_user_id": CHANNEL_ID, "moderator_user_id": CHANNEL_ID},
            "transport": {"method": "webhook", "callback": "https://example.com/webhook"},
            "created_at": "2026-10-19T10:11:12.123Z",
        },
        "event": {
            "user_id": "1234",
            "user_login": "cool_user",
            "user_name": "Cool_User",
            "broadcaster_user_id": CHANNEL_ID,
            "broadcaster_user_login": "cooler_user",
            "broadcaster_user_name": "Cooler_User",
            "followed_at": "2026-10-19T10:11:12.123Z",
        },
    }


@pytest.fixture
def follow_body(follow_payload) -> str:
    return json.dumps(follow_payload)
