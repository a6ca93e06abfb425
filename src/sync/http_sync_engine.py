# src/sync/http_sync_engine.py — v1
"""Online sync engine: every operation goes through the transport.

Concurrent operations on one resource are not serialized; each sends its own
request and the last response merged wins.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable

from halgraph.core.models import HttpRequest, HttpResponse
from halgraph.logging.context import set_mode_context, set_operation_context
from halgraph.resource.base_resource import RequestShaper, Resource
from halgraph.sync.base_sync_engine import BaseSyncEngine, utcnow
from halgraph.transport.base_transport import BaseTransport

logger = logging.getLogger(__name__)

SyncHook = Callable[[list[Resource], datetime | None], Awaitable[None]]


class HttpSyncEngine(BaseSyncEngine):
    """Synchronizes resources with the server.

    Args:
        transport: Transport performing the HTTP requests.
        sync_hook: Awaited with the resources and sync time before their
            in-memory sync time is updated (the offline engine persists
            them there).
    """

    def __init__(
        self, transport: BaseTransport, sync_hook: SyncHook | None = None
    ) -> None:
        self._transport = transport
        self._sync_hook = sync_hook

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    async def get(self, resource: Resource) -> Resource:
        self._enter("get", resource)
        response = await self._transport.request(resource.get_request())
        received = utcnow()
        updated = resource.merge_response(response)
        await self.mark_synced(updated, received)
        logger.debug("Synchronized %d resource(s)", len(updated))
        return resource

    async def put(self, resource: Resource) -> Resource:
        self._enter("put", resource)
        return await self._put(resource, resource.put_request())

    async def put_state(self, resource: Resource) -> Resource:
        self._enter("put", resource)
        return await self._put(resource, resource.put_state_request())

    async def _put(self, resource: Resource, request: HttpRequest) -> Resource:
        response = await self._transport.request(request)
        if response.has_body:
            updated = resource.merge_response(response)
        else:
            updated = [resource]
        await self.mark_synced(updated, utcnow())
        return resource

    async def delete(self, resource: Resource) -> Resource:
        self._enter("delete", resource)
        await self._transport.request(resource.delete_request())
        await self.mark_synced([resource], None)
        return resource

    async def post(
        self,
        resource: Resource,
        body: Any,
        headers: dict[str, str] | None = None,
        shaper: RequestShaper | None = None,
    ) -> HttpResponse:
        self._enter("post", resource)
        return await self._transport.request(resource.post_request(body, headers, shaper))

    async def mark_synced(
        self, resources: list[Resource], sync_time: datetime | None
    ) -> None:
        if self._sync_hook is not None:
            await self._sync_hook(resources, sync_time)
        for resource in resources:
            resource.sync_time = sync_time

    def _enter(self, operation: str, resource: Resource) -> None:
        set_operation_context(resource.context.context_id, operation, resource.uri)
        set_mode_context("online")
