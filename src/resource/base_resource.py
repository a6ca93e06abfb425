# src/resource/base_resource.py — v1
"""Abstract resource: identity, sync timestamp, request builders.

Concrete resources (HalResource, GenericResource) supply the request
builders and the update step. Sync operations are delegated to the engine
of the resource's context, so the same resource works unchanged with the
online and the offline engine.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable

from halgraph.core.errors import AbstractMethodError
from halgraph.core.models import HttpRequest, HttpResponse

if TYPE_CHECKING:
    from halgraph.context.hal_context import HalContext

RequestShaper = Callable[[HttpRequest], HttpRequest]


class Resource:
    """Base class for resources living in a HalContext."""

    def __init__(self, uri: str, context: HalContext) -> None:
        self._uri = uri
        self._context = context
        # Time of the last successful GET or PUT; None when unsynced.
        self.sync_time: datetime | None = None

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def context(self) -> HalContext:
        return self._context

    @property
    def synced(self) -> bool:
        return self.sync_time is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._uri!r})"

    # --- Request builders ---

    def get_request(self) -> HttpRequest:
        raise AbstractMethodError(type(self).__name__, "get_request")

    def put_request(self) -> HttpRequest:
        raise AbstractMethodError(type(self).__name__, "put_request")

    def put_state_request(self) -> HttpRequest:
        return self.put_request()

    def delete_request(self) -> HttpRequest:
        return HttpRequest(method="delete", url=self._uri)

    def post_request(
        self,
        body: Any,
        headers: dict[str, str] | None = None,
        shaper: RequestShaper | None = None,
    ) -> HttpRequest:
        """Build a POST request, optionally passed through `shaper`."""
        request = HttpRequest(
            method="post", url=self._uri, body=body, headers=dict(headers or {})
        )
        if shaper is not None:
            request = shaper(request)
        return request

    # --- State ---

    def update(self, data: Any) -> list[Resource]:
        """Replace the resource state with `data`; return touched resources."""
        raise AbstractMethodError(type(self).__name__, "update")

    def merge_response(self, response: HttpResponse) -> list[Resource]:
        """Update from a response body; 204 touches only this resource."""
        if response.status == 204:
            return [self]
        return self.update(response.body)

    def to_representation(self) -> Any:
        """Representation stored in the offline cache."""
        raise AbstractMethodError(type(self).__name__, "to_representation")

    def spawn(self, context: HalContext) -> Resource:
        """Create an empty resource of the same kind for `context`."""
        return type(self)(self._uri, context)

    def copy_from(self, other: Resource) -> None:
        raise AbstractMethodError(type(self).__name__, "copy_from")

    # --- Sync operations ---

    async def load(self) -> Resource:
        """GET unless already synced."""
        return await self._context.engine.load(self)

    async def get(self) -> Resource:
        return await self._context.engine.get(self)

    async def put(self) -> Resource:
        return await self._context.engine.put(self)

    async def put_state(self) -> Resource:
        return await self._context.engine.put_state(self)

    async def delete(self) -> Resource:
        return await self._context.engine.delete(self)

    async def post(
        self,
        body: Any,
        headers: dict[str, str] | None = None,
        shaper: RequestShaper | None = None,
    ) -> HttpResponse | None:
        return await self._context.engine.post(self, body, headers, shaper)
