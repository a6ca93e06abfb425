# src/sync/offline_sync_engine.py — v1
"""Offline-capable sync engine.

Wraps an HttpSyncEngine. The reachability signal is read at the start of
each operation:

    online   delegate to the HTTP engine; every resource it marks synced
             is written through to the store (DELETE evicts it)
    offline  GET reads the store; PUT/DELETE queue the request and apply
             the local effect in one store transaction; POST is queued only

Queued requests are sent by `replay()` once the network is back.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from halgraph.cache.base_resource_store import BaseResourceStore
from halgraph.cache.models import CachedResource, QueuedRequest
from halgraph.core.models import HttpRequest, HttpResponse
from halgraph.logging.context import set_mode_context, set_operation_context
from halgraph.resource.base_resource import RequestShaper, Resource
from halgraph.sync.base_sync_engine import BaseSyncEngine, utcnow
from halgraph.sync.http_sync_engine import HttpSyncEngine
from halgraph.sync.reachability import BaseReachability
from halgraph.transport.base_transport import BaseTransport

logger = logging.getLogger(__name__)


class OfflineSyncEngine(BaseSyncEngine):
    """Sync engine that keeps working without network."""

    def __init__(
        self,
        transport: BaseTransport,
        store: BaseResourceStore,
        reachability: BaseReachability,
        *,
        coalesce_requests: bool = True,
    ) -> None:
        self._transport = transport
        self._store = store
        self._reachability = reachability
        self._coalesce = coalesce_requests
        self._online = HttpSyncEngine(transport, sync_hook=self._persist)

    @property
    def store(self) -> BaseResourceStore:
        return self._store

    @property
    def online_engine(self) -> HttpSyncEngine:
        return self._online

    def _offline(self, operation: str, resource: Resource) -> bool:
        offline = self._reachability.offline
        set_operation_context(resource.context.context_id, operation, resource.uri)
        set_mode_context("offline" if offline else "online")
        return offline

    # --- Operations ---

    async def get(self, resource: Resource) -> Resource:
        if not self._offline("get", resource):
            return await self._online.get(resource)

        cached = await self._store.get_resource(resource.uri)
        if cached is None:
            logger.info("No cached copy of %s, returning it unpopulated", resource.uri)
            return resource

        updated = resource.update(cached.data)
        for touched in updated:
            touched.sync_time = cached.sync_time
        return resource

    async def put(self, resource: Resource) -> Resource:
        if not self._offline("put", resource):
            return await self._online.put(resource)
        return await self._queue_put(resource, resource.put_request())

    async def put_state(self, resource: Resource) -> Resource:
        if not self._offline("put", resource):
            return await self._online.put_state(resource)
        return await self._queue_put(resource, resource.put_state_request())

    async def _queue_put(self, resource: Resource, request: HttpRequest) -> Resource:
        async with self._store.transaction():
            await self._enqueue(request)
            await self._store.put_resource(
                CachedResource(
                    uri=resource.uri,
                    data=resource.to_representation(),
                    sync_time=None,
                    cached_at=utcnow(),
                )
            )
        return resource

    async def delete(self, resource: Resource) -> Resource:
        if not self._offline("delete", resource):
            return await self._online.delete(resource)

        async with self._store.transaction():
            await self._enqueue(resource.delete_request())
            await self._store.delete_resource(resource.uri)
        return resource

    async def post(
        self,
        resource: Resource,
        body: Any,
        headers: dict[str, str] | None = None,
        shaper: RequestShaper | None = None,
    ) -> HttpResponse | None:
        if not self._offline("post", resource):
            return await self._online.post(resource, body, headers, shaper)

        await self._enqueue(resource.post_request(body, headers, shaper))
        return None

    async def mark_synced(
        self, resources: list[Resource], sync_time: datetime | None
    ) -> None:
        await self._online.mark_synced(resources, sync_time)

    # --- Queue ---

    async def pending_requests(self) -> list[QueuedRequest]:
        """Requests queued while offline, oldest first."""
        return await self._store.list_requests()

    async def replay(self) -> int:
        """Send queued requests in order; stop at the first failure.

        Each request leaves the queue only after the transport accepted it.

        Returns:
            Number of requests sent.
        """
        if self._reachability.offline:
            logger.info("Still offline, not replaying queued requests")
            return 0

        sent = 0
        for queued in await self._store.list_requests():
            await self._transport.request(queued.request)
            await self._store.delete_request(queued.id)
            sent += 1
        if sent:
            logger.info("Replayed %d queued request(s)", sent)
        return sent

    async def _enqueue(self, request: HttpRequest) -> None:
        if self._coalesce and request.method in ("put", "delete"):
            # A newer PUT or DELETE makes earlier queued PUTs of the URL obsolete.
            for stale in await self._store.find_requests(request.url, "put"):
                await self._store.delete_request(stale.id)
        request_id = await self._store.add_request(
            QueuedRequest(request=request, queued_at=utcnow())
        )
        logger.info("Queued %s %s (#%d)", request.method.upper(), request.url, request_id)

    async def _persist(
        self, resources: list[Resource], sync_time: datetime | None
    ) -> None:
        now = utcnow()
        async with self._store.transaction():
            for resource in resources:
                if sync_time is not None:
                    await self._store.put_resource(
                        CachedResource(
                            uri=resource.uri,
                            data=resource.to_representation(),
                            sync_time=sync_time,
                            cached_at=now,
                        )
                    )
                else:
                    await self._store.delete_resource(resource.uri)
