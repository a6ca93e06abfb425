# src/sync/base_sync_engine.py — v1
"""Sync engine interface shared by the online and offline engines.

A context holds one engine; resources delegate their get/put/delete/post
operations to it, so swapping engines never changes resource code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from halgraph.core.models import HttpResponse
from halgraph.resource.base_resource import RequestShaper, Resource


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseSyncEngine(ABC):
    """Unified interface for resource synchronization."""

    async def load(self, resource: Resource) -> Resource:
        """Return synced resources as-is; GET the others."""
        if resource.synced:
            return resource
        return await self.get(resource)

    @abstractmethod
    async def get(self, resource: Resource) -> Resource:
        """Fetch and merge the resource representation."""

    @abstractmethod
    async def put(self, resource: Resource) -> Resource:
        """Write the full resource representation."""

    @abstractmethod
    async def put_state(self, resource: Resource) -> Resource:
        """Write the resource state only."""

    @abstractmethod
    async def delete(self, resource: Resource) -> Resource:
        """Delete the resource and mark it unsynced."""

    @abstractmethod
    async def post(
        self,
        resource: Resource,
        body: Any,
        headers: dict[str, str] | None = None,
        shaper: RequestShaper | None = None,
    ) -> HttpResponse | None:
        """POST to the resource; sync state is never touched."""

    @abstractmethod
    async def mark_synced(
        self, resources: list[Resource], sync_time: datetime | None
    ) -> None:
        """Record the sync time (None: unsynced) of the given resources."""
