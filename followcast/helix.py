"""Twitch Helix EventSub API client."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from .config import DEFAULT_AUTH_URL, DEFAULT_HELIX_URL

logger = logging.getLogger(__name__)

_TIMEOUT = httpx.Timeout(10.0)


class HelixError(Exception):
    """Raised when a Helix call fails at the transport or HTTP level."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


@dataclass
class Subscription:
    id: str
    type: str
    version: str
    status: str
    condition: dict[str, Any] = field(default_factory=dict)
    callback: str | None = None
    created_at: str | None = None

    @classmethod
    def _from_dict(cls, d: dict) -> "Subscription":
        return cls(
            id=d["id"],
            type=d.get("type", ""),
            version=d.get("version", ""),
            status=d.get("status", ""),
            condition=d.get("condition") or {},
            callback=(d.get("transport") or {}).get("callback"),
            created_at=d.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "version": self.version,
            "status": self.status,
            "condition": self.condition,
            "transport": {"method": "webhook", "callback": self.callback},
            "created_at": self.created_at,
        }


class HelixClient:
    """Async client for the EventSub subscription endpoints.

    The app access token is fetched lazily with the client-credentials grant
    and kept for the lifetime of the client; a 401 from Helix triggers one
    refresh and retry of that call.

    Usage::

        helix = HelixClient(client_id, client_secret)
        try:
            subs = await helix.list_subscriptions()
        finally:
            await helix.aclose()
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        base_url: str = DEFAULT_HELIX_URL,
        auth_url: str = DEFAULT_AUTH_URL,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._base_url = base_url.rstrip("/")
        self._auth_url = auth_url
        self._http = http or httpx.AsyncClient(timeout=_TIMEOUT)
        self._token: str | None = None

    # ── Public API ────────────────────────────────────────────────────────

    async def list_subscriptions(self, status: str | None = "enabled") -> list[Subscription]:
        """Return every subscription with ``status``, following pagination."""
        subs: list[Subscription] = []
        cursor: str | None = None
        while True:
            params: dict[str, str] = {}
            if status:
                params["status"] = status
            if cursor:
                params["after"] = cursor
            data = await self._request("GET", "/eventsub/subscriptions", params=params)
            subs.extend(Subscription._from_dict(s) for s in data.get("data", []))
            cursor = (data.get("pagination") or {}).get("cursor")
            if not cursor:
                return subs

    async def create_subscription(
        self,
        type: str,
        version: str,
        condition: dict[str, Any],
        callback: str,
        secret: str,
    ) -> Subscription:
        """Create a webhook-transport subscription and return its descriptor."""
        payload = {
            "type": type,
            "version": version,
            "condition": condition,
            "transport": {"method": "webhook", "callback": callback, "secret": secret},
        }
        data = await self._request("POST", "/eventsub/subscriptions", json=payload)
        items = data.get("data") or []
        if not items:
            raise HelixError("Helix returned no subscription for create request")
        return Subscription._from_dict(items[0])

    async def delete_subscription(self, id: str) -> None:
        await self._request("DELETE", "/eventsub/subscriptions", params={"id": id})

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Internals ─────────────────────────────────────────────────────────

    async def _fetch_token(self) -> str:
        try:
            response = await self._http.post(
                self._auth_url,
                params={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "grant_type": "client_credentials",
                },
            )
        except httpx.HTTPError as exc:
            raise HelixError(f"Token request failed: {exc}") from exc
        if response.status_code >= 400:
            logger.error("Twitch token error %s: %s", response.status_code, response.text)
            raise HelixError(response.text or "Token request failed", response.status_code)
        try:
            data = response.json()
        except ValueError as exc:
            raise HelixError("Token response was not JSON") from exc
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise HelixError("Token response carried no access_token")
        return token

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        if self._token is None:
            self._token = await self._fetch_token()
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Client-Id": self._client_id,
        }
        try:
            return await self._http.request(method, f"{self._base_url}{path}", headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise HelixError(f"{method} {path} failed: {exc}") from exc

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        response = await self._send(method, path, **kwargs)
        if response.status_code == 401:
            logger.info("Helix rejected app token, refreshing")
            self._token = None
            response = await self._send(method, path, **kwargs)
        if response.status_code >= 400:
            detail = response.text or f"Helix {method} {path} failed"
            logger.error("Helix %s %s error %s: %s", method, path, response.status_code, detail)
            raise HelixError(detail, response.status_code)
        if response.status_code == 204 or not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as exc:
            raise HelixError(f"Helix {method} {path} returned non-JSON payload") from exc
        if not isinstance(data, dict):
            raise HelixError(f"Helix {method} {path} returned a non-object payload")
        return data
