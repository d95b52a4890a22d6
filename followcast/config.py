"""Environment-sourced settings, read once at process start."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .errors import ConfigError

DEFAULT_HELIX_URL = "https://api.twitch.tv/helix"
DEFAULT_AUTH_URL = "https://id.twitch.tv/oauth2/token"

_REQUIRED = {
    "pusher_app_id": "PUSHER_APP_ID",
    "pusher_key": "PUSHER_KEY",
    "pusher_secret": "PUSHER_SECRET",
    "pusher_cluster": "PUSHER_CLUSTER",
    "twitch_client_id": "TWITCH_CLIENT_ID",
    "twitch_client_secret": "TWITCH_CLIENT_SECRET",
    "webhook_secret": "MY_TWITCH_SECRET",
    "channel_id": "TWITCH_CHANNEL_ID",
}

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    pusher_app_id: str
    pusher_key: str
    pusher_secret: str
    pusher_cluster: str
    twitch_client_id: str
    twitch_client_secret: str
    webhook_secret: str
    channel_id: str
    debug: bool = False
    callback_url: str | None = None
    helix_url: str = DEFAULT_HELIX_URL
    auth_url: str = DEFAULT_AUTH_URL
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from the environment.

        Raises:
            ConfigError: One or more required variables are unset or empty.
        """
        env = os.environ if environ is None else environ
        missing = [var for var in _REQUIRED.values() if not env.get(var)]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")
        return cls(
            **{name: env[var] for name, var in _REQUIRED.items()},
            debug=env.get("DEBUG_CALLBACK", "").strip().lower() in _TRUTHY,
            callback_url=env.get("FOLLOWCAST_CALLBACK_URL") or None,
            helix_url=env.get("TWITCH_API_URL", DEFAULT_HELIX_URL).rstrip("/"),
            auth_url=env.get("TWITCH_AUTH_URL", DEFAULT_AUTH_URL),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )
