"""Optional debug mirror for inbound events and intermediate results."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from .broadcast import BroadcastError

if TYPE_CHECKING:
    from .broadcast import Broadcaster

logger = logging.getLogger(__name__)

DEBUG_CHANNEL = "debug"


class DebugSink:
    """Observer the handlers call unconditionally.

    When disabled every ``emit`` is a no-op. When enabled the step is logged
    and published to the ``debug`` channel under the step label.
    """

    def __init__(self, broadcaster: "Broadcaster | None", enabled: bool = False) -> None:
        self._broadcaster = broadcaster
        self.enabled = enabled and broadcaster is not None

    async def emit(self, label: str, data: Any) -> None:
        if not self.enabled:
            return
        logger.debug("%s: %s", label, json.dumps(data, default=str))
        assert self._broadcaster is not None
        try:
            await self._broadcaster.publish(DEBUG_CHANNEL, label, {"label": label, "data": data})
        except BroadcastError as exc:
            logger.warning("Debug publish for %s failed: %s", label, exc)
