# src/core/models.py — v1
"""Request/response envelopes exchanged with the transport.

Ephemeral values: no resource owns them. The offline engine persists
requests in its queue (see cache.models).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

HAL_MEDIA_TYPE = "application/hal+json"
JSON_MEDIA_TYPE = "application/json"

Method = Literal["get", "put", "delete", "post"]


class HttpRequest(BaseModel):
    """Transport-independent request description."""

    method: Method
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None


class HttpResponse(BaseModel):
    """Transport-independent response description."""

    status: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: str | None = None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def media_type(self) -> str | None:
        """Content-Type without parameters, lower-cased."""
        content_type = self.header("Content-Type")
        if content_type is None:
            return None
        return content_type.split(";", 1)[0].strip().lower()

    @property
    def has_body(self) -> bool:
        return self.status != 204 and bool(self.body)
