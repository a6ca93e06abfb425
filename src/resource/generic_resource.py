# src/resource/generic_resource.py — v1
"""Non-HAL resource with a media type and an opaque payload.

Lives in the same context as HAL resources (create it with a factory passed
to `HalContext.get`) and uses the same sync engines.
"""

from __future__ import annotations

import copy
import json
from typing import TYPE_CHECKING, Any

from halgraph.core.models import HttpRequest, HttpResponse
from halgraph.resource.base_resource import Resource

if TYPE_CHECKING:
    from halgraph.context.hal_context import HalContext


class GenericResource(Resource):
    """Resource whose whole representation is `data`."""

    def __init__(
        self,
        uri: str,
        context: HalContext,
        media_type: str = "application/octet-stream",
        data: Any = None,
    ) -> None:
        super().__init__(uri, context)
        self.media_type = media_type
        self.data = data

    @classmethod
    def factory(cls, media_type: str):
        """Resource factory for `HalContext.get(uri, factory=...)`."""

        def create(uri: str, context: HalContext) -> GenericResource:
            return cls(uri, context, media_type)

        return create

    def get_request(self) -> HttpRequest:
        return HttpRequest(
            method="get", url=self.uri, headers={"Accept": self.media_type}
        )

    def put_request(self) -> HttpRequest:
        return HttpRequest(
            method="put",
            url=self.uri,
            body=self.data,
            headers={"Content-Type": self.media_type},
        )

    def update(self, data: Any) -> list[Resource]:
        self.data = data
        return [self]

    def merge_response(self, response: HttpResponse) -> list[Resource]:
        if response.status == 204:
            return [self]
        body: Any = response.body
        media_type = response.media_type or ""
        if body and (media_type == "application/json" or media_type.endswith("+json")):
            body = json.loads(body)
        return self.update(body)

    def to_representation(self) -> Any:
        return self.data

    def spawn(self, context: HalContext) -> GenericResource:
        return type(self)(self.uri, context, self.media_type)

    def copy_from(self, other: Resource) -> None:
        if not isinstance(other, GenericResource):
            raise TypeError(f"Cannot copy {type(other).__name__} into GenericResource")
        self.media_type = other.media_type
        self.data = copy.deepcopy(other.data)
