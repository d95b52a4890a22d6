"""followcast: relay Twitch EventSub notifications to Pusher."""

from .errors import AuthError, ClientError, ConfigError, FollowcastError, UpstreamError
from .handler import Services, handle
from .models import HandlerResponse, InboundRequest
from .webhook import compute_signature, verify_request, verify_signature

__all__ = [
    "AuthError",
    "ClientError",
    "ConfigError",
    "FollowcastError",
    "UpstreamError",
    "Services",
    "handle",
    "HandlerResponse",
    "InboundRequest",
    "compute_signature",
    "verify_request",
    "verify_signature",
]
__version__ = "0.1.0"
