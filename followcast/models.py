"""Request-scoped values passed between the HTTP layer and the handlers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class InboundRequest:
    method: str
    headers: Mapping[str, str]
    body: bytes = b""
    query: Mapping[str, str] = field(default_factory=dict)
    url: str = ""

    @classmethod
    def build(
        cls,
        method: str,
        headers: Mapping[str, str],
        body: bytes | str = b"",
        query: Mapping[str, str] | None = None,
        url: str = "",
    ) -> "InboundRequest":
        """Normalise header names to lowercase. The body is kept as raw bytes."""
        if isinstance(body, str):
            body = body.encode()
        return cls(
            method=method.upper(),
            headers={k.lower(): v for k, v in headers.items()},
            body=body,
            query=dict(query or {}),
            url=url,
        )

    def header(self, name: str, default: str = "") -> str:
        return self.headers.get(name.lower(), default)


@dataclass(frozen=True)
class HandlerResponse:
    status_code: int = 200
    body: str = ""
    content_type: str = "text/plain"

    @classmethod
    def text(cls, body: str = "", status_code: int = 200) -> "HandlerResponse":
        return cls(status_code=status_code, body=body)

    @classmethod
    def json(cls, data: Any, status_code: int = 200) -> "HandlerResponse":
        return cls(
            status_code=status_code,
            body=json.dumps(data),
            content_type="application/json",
        )
