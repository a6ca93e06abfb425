# src/resource/hal_resource.py — v1
"""HAL resource: property bag, link and embedded sections, profiles.

State is kept in three parts that mirror the wire format:

    properties  every JSON member except `_links` and `_embedded`
    links       the `_links` section (self link always present)
    embedded    the `_embedded` section of the last representation

Profile properties are computed attributes installed on a per-resource
ProfileExtension and reached with attribute access (`resource.full_name`).
"""

from __future__ import annotations

import copy
import json
from typing import TYPE_CHECKING, Any

from halgraph.core.errors import ContentTypeError, EmptyBodyError
from halgraph.core.links import as_list, resolve_href, resolve_property, resolve_relation
from halgraph.core.models import HAL_MEDIA_TYPE, JSON_MEDIA_TYPE, HttpRequest, HttpResponse
from halgraph.core.profiles import ProfileExtension
from halgraph.resource.base_resource import Resource

if TYPE_CHECKING:
    from halgraph.context.hal_context import HalContext

RESERVED_SECTIONS = ("_links", "_embedded")

Profile = str | list[str] | None


class HalResource(Resource):
    """A resource with a HAL JSON representation."""

    def __init__(self, uri: str, context: HalContext) -> None:
        self._extension = ProfileExtension()
        self._profile: Profile = None
        super().__init__(uri, context)
        self.properties: dict[str, Any] = {}
        self.links: dict[str, Any] = {"self": {"href": uri}}
        self.embedded: dict[str, Any] = {}

    # --- Profile extension layer ---

    def __getattr__(self, name: str) -> Any:
        extension = self.__dict__.get("_extension")
        if extension is not None:
            definition = extension.lookup(name)
            if definition is not None:
                return definition.fget(self)
        raise AttributeError(
            f"{type(self).__name__!r} object has no attribute {name!r}"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        extension = self.__dict__.get("_extension")
        if (
            extension is not None
            and not name.startswith("_")
            and name not in self.__dict__
            and not hasattr(type(self), name)
        ):
            definition = extension.lookup(name)
            if definition is not None:
                if definition.fset is None:
                    raise AttributeError(f"Profile property {name!r} is read-only")
                definition.fset(self, value)
                return
        object.__setattr__(self, name, value)

    @property
    def profile(self) -> Profile:
        """Profile URI(s) whose properties are installed on this resource."""
        return self._profile

    @profile.setter
    def profile(self, value: Profile) -> None:
        self.apply_profile(value)

    def apply_profile(self, profile: Profile) -> None:
        """Replace the installed profile properties.

        Later profiles in a list shadow properties of earlier ones. Passing
        None (or an empty list) removes every installed property.
        """
        if not self._profile and not profile:
            return
        self._extension.clear()
        registry = self._context.profiles
        for uri in as_list(profile):
            self._extension.install(registry.get(uri))
        self._profile = profile or None

    # --- Links ---

    def href(
        self, rel: str, variables: dict[str, Any] | None = None
    ) -> str | list[str] | None:
        """Resolve the href(s) of a relation."""
        return resolve_href(self, rel, variables, expand=self._context.expand)

    def rel(
        self, rel: str, variables: dict[str, Any] | None = None
    ) -> Resource | list[Resource] | None:
        """Follow a relation to the linked resource(s)."""
        return resolve_relation(self._context, self, rel, variables)

    def prop(self, name: str) -> Resource | list[Resource] | None:
        """Follow a property holding URI(s) to the resource(s)."""
        return resolve_property(self._context, self, name)

    # --- State ---

    def to_state(self) -> dict[str, Any]:
        """Shallow copy of the properties, without links and embedded."""
        return dict(self.properties)

    def to_representation(self) -> dict[str, Any]:
        """Full HAL document for this resource."""
        representation = dict(self.properties)
        representation["_links"] = dict(self.links)
        if self.embedded:
            representation["_embedded"] = dict(self.embedded)
        return representation

    def replace_state(self, data: dict[str, Any]) -> None:
        """Make the resource state mirror `data` exactly.

        Every existing property is removed before the new ones are assigned,
        so nothing from an older representation survives.
        """
        self.properties.clear()
        for key, value in data.items():
            if key not in RESERVED_SECTIONS:
                self.properties[key] = value
        links = dict(data.get("_links") or {})
        links.setdefault("self", {"href": self._uri})
        self.links = links
        self.embedded = dict(data.get("_embedded") or {})

    def update(self, data: Any) -> list[Resource]:
        """Extract `data` (and everything it embeds) into the context."""
        return self._context.extract(data, expected_uri=self._uri)

    def merge_response(self, response: HttpResponse) -> list[Resource]:
        if response.status == 204:
            return [self]
        if response.media_type != HAL_MEDIA_TYPE:
            raise ContentTypeError(
                f"Not {HAL_MEDIA_TYPE}: {response.header('Content-Type')!r}"
            )
        if not response.body:
            raise EmptyBodyError(f"No data in response from {self._uri}")
        try:
            data = json.loads(response.body)
        except ValueError as exc:
            raise ContentTypeError(f"Invalid HAL document from {self._uri}: {exc}") from exc
        return self.update(data)

    def copy_from(self, other: Resource) -> None:
        if not isinstance(other, HalResource):
            raise TypeError(f"Cannot copy {type(other).__name__} into HalResource")
        self.replace_state(copy.deepcopy(other.to_representation()))
        self.profile = copy.copy(other.profile)

    # --- Request builders ---

    def get_request(self) -> HttpRequest:
        return HttpRequest(
            method="get", url=self._uri, headers={"Accept": HAL_MEDIA_TYPE}
        )

    def put_request(self) -> HttpRequest:
        return HttpRequest(
            method="put",
            url=self._uri,
            body=self.to_representation(),
            headers={"Accept": HAL_MEDIA_TYPE, "Content-Type": HAL_MEDIA_TYPE},
        )

    def put_state_request(self) -> HttpRequest:
        return HttpRequest(
            method="put",
            url=self._uri,
            body=self.to_state(),
            headers={"Accept": HAL_MEDIA_TYPE, "Content-Type": JSON_MEDIA_TYPE},
        )
