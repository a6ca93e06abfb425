# src/cache/models.py — v1
"""Offline cache models: CachedResource, QueuedRequest."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from halgraph.core.models import HttpRequest


class CachedResource(BaseModel):
    """Snapshot of a resource representation kept for offline reads."""

    uri: str
    data: Any
    sync_time: datetime | None = None
    cached_at: datetime


class QueuedRequest(BaseModel):
    """A mutating request recorded while offline, awaiting replay."""

    id: int | None = None
    request: HttpRequest
    queued_at: datetime

    @property
    def url(self) -> str:
        return self.request.url

    @property
    def method(self) -> str:
        return self.request.method
