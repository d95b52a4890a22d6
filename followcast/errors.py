"""Error taxonomy. Every per-request failure maps onto an HTTP status."""

from __future__ import annotations


class FollowcastError(Exception):
    """Base class for failures that terminate a request."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientError(FollowcastError):
    """Bad action/type, or the subscription is already in the desired state."""

    status_code = 400


class AuthError(FollowcastError):
    """Raised when webhook signature verification fails."""

    status_code = 403

    def __init__(self, message: str = "Verification failed.") -> None:
        super().__init__(message)


class UpstreamError(FollowcastError):
    """Helix or Pusher failure, or a body that is not valid JSON."""

    status_code = 500


class ConfigError(FollowcastError, RuntimeError):
    """Raised at startup when required environment variables are missing."""
