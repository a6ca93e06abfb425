# src/cache/base_resource_store.py — v1
"""Abstract persistent store for the offline engine.

Two spaces share one store: `resources` (cached representations keyed by
URI) and `requests` (the ordered queue of mutating requests recorded while
offline). `transaction()` groups operations on both spaces atomically.

Backends report trouble through lifecycle events ("error", "blocked") in
addition to raising StoreError, so a host can surface them to operators.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import AsyncContextManager, Callable

from halgraph.cache.models import CachedResource, QueuedRequest

logger = logging.getLogger(__name__)

StoreListener = Callable[[str], None]

STORE_EVENTS = ("error", "blocked")


class BaseResourceStore(ABC):
    """Unified interface for offline cache backends."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[StoreListener]] = {e: [] for e in STORE_EVENTS}

    # --- resources space ---

    @abstractmethod
    async def get_resource(self, uri: str) -> CachedResource | None:
        """Retrieve the cached representation of a resource."""

    @abstractmethod
    async def put_resource(self, entry: CachedResource) -> None:
        """Store (upsert) a cached representation."""

    @abstractmethod
    async def delete_resource(self, uri: str) -> None:
        """Evict a cached representation (no-op if absent)."""

    # --- requests space ---

    @abstractmethod
    async def add_request(self, queued: QueuedRequest) -> int:
        """Append a request to the queue; return its id."""

    @abstractmethod
    async def list_requests(self) -> list[QueuedRequest]:
        """All queued requests, oldest first."""

    @abstractmethod
    async def delete_request(self, request_id: int) -> None:
        """Remove a request from the queue."""

    async def find_requests(self, url: str, method: str) -> list[QueuedRequest]:
        """Queued requests for a (url, method) pair, oldest first."""
        return [
            queued
            for queued in await self.list_requests()
            if queued.url == url and queued.method == method
        ]

    # --- transactions / lifecycle ---

    @abstractmethod
    def transaction(self) -> AsyncContextManager[None]:
        """Atomic scope spanning both spaces; nested scopes join the outer one."""

    def close(self) -> None:
        """Release backend resources."""

    def on(self, event: str, listener: StoreListener) -> None:
        """Subscribe to a lifecycle event ("error" or "blocked")."""
        if event not in self._listeners:
            raise ValueError(f"Unknown store event: {event!r}")
        self._listeners[event].append(listener)

    def _emit(self, event: str, message: str) -> None:
        if event == "blocked":
            logger.warning("ResourceStore: database is blocked: %s", message)
        else:
            logger.error("ResourceStore: %s", message)
        for listener in self._listeners[event]:
            listener(message)
