# src/cache/memory_store.py — v1
"""In-process store (CACHE_BACKEND=memory).

Nothing survives the process; useful for tests and short-lived sessions.
Transactions snapshot both spaces and restore them on error.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from halgraph.cache.base_resource_store import BaseResourceStore
from halgraph.cache.models import CachedResource, QueuedRequest


class MemoryResourceStore(BaseResourceStore):
    """Dict-backed store."""

    def __init__(self) -> None:
        super().__init__()
        self._resources: dict[str, CachedResource] = {}
        self._requests: dict[int, QueuedRequest] = {}
        self._next_id = 1
        self._depth = 0

    async def get_resource(self, uri: str) -> CachedResource | None:
        entry = self._resources.get(uri)
        return entry.model_copy(deep=True) if entry is not None else None

    async def put_resource(self, entry: CachedResource) -> None:
        self._resources[entry.uri] = entry.model_copy(deep=True)

    async def delete_resource(self, uri: str) -> None:
        self._resources.pop(uri, None)

    async def add_request(self, queued: QueuedRequest) -> int:
        request_id = self._next_id
        self._next_id += 1
        self._requests[request_id] = queued.model_copy(
            update={"id": request_id}, deep=True
        )
        return request_id

    async def list_requests(self) -> list[QueuedRequest]:
        return [q.model_copy(deep=True) for _, q in sorted(self._requests.items())]

    async def delete_request(self, request_id: int) -> None:
        self._requests.pop(request_id, None)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snapshot = (dict(self._resources), dict(self._requests), self._next_id)
        self._depth = 1
        try:
            yield
        except BaseException:
            self._resources, self._requests, self._next_id = snapshot
            raise
        finally:
            self._depth = 0
