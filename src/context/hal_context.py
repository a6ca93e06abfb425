# src/context/hal_context.py — v1
"""Identity map of resources and extraction of nested HAL documents.

A HalContext holds at most one resource per URI for its whole lifetime.
`get` is the only place resources are created; everything else (link
following, extraction, copying) goes through it.

Extraction is all-or-nothing: a nested document is first walked and
validated completely, and only then are resources created and updated.
A bad self link anywhere leaves the context untouched.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Iterator

from halgraph.core.errors import ConsistencyError, HalError
from halgraph.core.links import Expander, as_list, for_each, self_href
from halgraph.core.profiles import ProfileRegistry, default_registry
from halgraph.resource.base_resource import Resource
from halgraph.resource.hal_resource import HalResource

if TYPE_CHECKING:
    from halgraph.sync.base_sync_engine import BaseSyncEngine

logger = logging.getLogger(__name__)

ResourceFactory = Callable[[str, "HalContext"], Resource]


def default_resource_factory(uri: str, context: HalContext) -> Resource:
    return HalResource(uri, context)


class HalContext:
    """Identity map for linked resources."""

    def __init__(
        self,
        engine: BaseSyncEngine | None = None,
        *,
        resource_factory: ResourceFactory | None = None,
        profiles: ProfileRegistry | None = None,
        expand: Expander | None = None,
        backfill_links: bool = False,
        context_id: str | None = None,
    ) -> None:
        self.resources: dict[str, Resource] = {}
        self.resource_factory = resource_factory or default_resource_factory
        self.profiles = profiles if profiles is not None else default_registry
        self.expand = expand
        self.backfill_links = backfill_links
        self.context_id = context_id or uuid.uuid4().hex[:8]
        self._engine = engine

    @property
    def engine(self) -> BaseSyncEngine:
        if self._engine is None:
            raise HalError(f"Context {self.context_id} has no sync engine")
        return self._engine

    @engine.setter
    def engine(self, engine: BaseSyncEngine) -> None:
        self._engine = engine

    def __contains__(self, uri: object) -> bool:
        return uri in self.resources

    def __len__(self) -> int:
        return len(self.resources)

    def __iter__(self) -> Iterator[str]:
        return iter(self.resources)

    def get(self, uri: str, factory: ResourceFactory | None = None) -> Resource:
        """Return the resource for `uri`, creating it on first reference."""
        resource = self.resources.get(uri)
        if resource is None:
            resource = (factory or self.resource_factory)(uri, self)
            self.resources[uri] = resource
        return resource

    async def open(self, uri: str, factory: ResourceFactory | None = None) -> Resource:
        """Get the resource for `uri` and load it if unsynced."""
        return await self.get(uri, factory).load()

    def copy(self, resource: Resource) -> Resource:
        """Copy a resource (typically from another context) into this one."""
        target = self.get(resource.uri, factory=lambda uri, context: resource.spawn(context))
        target.copy_from(resource)
        return target

    # --- Extraction ---

    def extract(
        self, data: dict[str, Any], expected_uri: str | None = None
    ) -> list[Resource]:
        """Flatten a HAL document and everything it embeds into the context.

        Args:
            data: Parsed HAL document.
            expected_uri: URI the document was requested from; its self link
                must match.

        Returns:
            Every updated resource, embedded ones before their parent, the
            document's own resource last.

        Raises:
            ConsistencyError: A self link is missing or differs from
                `expected_uri`. Nothing is created or updated in that case.
        """
        plan: list[tuple[str, dict[str, Any]]] = []
        self._plan(data, expected_uri, plan)

        # Build missing resources before registering any of them.
        created: dict[str, Resource] = {}
        for href, _ in plan:
            if href in self.resources or href in created:
                continue
            resource = self.resource_factory(href, self)
            if not isinstance(resource, HalResource):
                raise HalError(
                    f"Resource factory built {type(resource).__name__} for {href}, "
                    "not a HAL resource"
                )
            created[href] = resource
        self.resources.update(created)

        now = datetime.now(timezone.utc)
        touched: list[Resource] = []
        for href, document in plan:
            if self.backfill_links:
                _backfill_links(document)
            resource = self.get(href)
            _apply_document(resource, document)
            resource.sync_time = now
            touched.append(resource)

        logger.debug(
            "Extracted %d resource(s) from %s", len(touched), plan[-1][0]
        )
        return touched

    def _plan(
        self,
        document: Any,
        expected_uri: str | None,
        plan: list[tuple[str, dict[str, Any]]],
    ) -> None:
        if not isinstance(document, dict):
            raise ConsistencyError(expected_uri, None)
        href = self_href(document)
        if href is None or (expected_uri is not None and href != expected_uri):
            raise ConsistencyError(expected_uri, href)
        existing = self.resources.get(href)
        if existing is not None and not isinstance(existing, HalResource):
            raise HalError(f"Resource {href} in context is not a HAL resource")

        for embeds in (document.get("_embedded") or {}).values():
            for embed in as_list(embeds):
                self._plan(embed, None, plan)
        plan.append((href, document))


def _backfill_links(document: dict[str, Any]) -> None:
    """Add `_links[rel]` for relations that are only embedded."""
    links = document.setdefault("_links", {})
    for rel, embeds in (document.get("_embedded") or {}).items():
        if rel not in links:
            links[rel] = for_each(embeds, lambda embed: {"href": self_href(embed)})


def _apply_document(resource: Resource, document: dict[str, Any]) -> None:
    links = document.get("_links") or {}
    profile = for_each(links.get("profile"), lambda link: link.get("href"))
    if profile:
        resource.apply_profile(profile)
    resource.replace_state(document)
