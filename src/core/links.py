# src/core/links.py — v1
"""Link relation resolution over `_links` and `_embedded` sections.

Pure functions: they read a resource's link and embedded sections and never
mutate them. Usage problems (templated link without variables, variables on a
plain link, deprecated relations) are reported as warnings on this module's
logger and never raised.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, TypeVar

import uritemplate

if TYPE_CHECKING:
    from halgraph.context.hal_context import HalContext
    from halgraph.resource.base_resource import Resource
    from halgraph.resource.hal_resource import HalResource

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Expander = Callable[[str, dict[str, Any]], str]


def for_each(value: T | list[T] | None, func: Callable[[T], R]) -> R | list[R] | None:
    """Apply `func` to a value or to every element of a list, keeping the shape."""
    if value is None:
        return None
    if isinstance(value, list):
        return [func(item) for item in value]
    return func(value)


def as_list(value: T | list[T] | None) -> list[T]:
    """Normalize a scalar-or-list section entry to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def self_href(document: dict[str, Any]) -> str | None:
    """Return `_links.self.href` of a HAL document, or None if absent."""
    links = document.get("_links") or {}
    self_link = links.get("self") or {}
    if isinstance(self_link, list):
        self_link = self_link[0] if self_link else {}
    return self_link.get("href")


def _default_expand(template: str, variables: dict[str, Any]) -> str:
    return uritemplate.expand(template, variables)


def resolve_href(
    resource: HalResource,
    rel: str,
    variables: dict[str, Any] | None = None,
    *,
    expand: Expander | None = None,
) -> str | list[str] | None:
    """Resolve the href(s) of a relation from links and embedded resources.

    Args:
        resource: Resource whose sections are read.
        rel: Relation name.
        variables: URI template variables for templated links.
        expand: URI template expander (defaults to `uritemplate.expand`).

    Returns:
        A single href, a list of hrefs (when either section holds a list, or
        both sections define `rel`), or None when `rel` is unknown.
    """
    expand = expand or _default_expand
    templated = False
    non_templated = False
    deprecations: dict[str, None] = {}

    def link_href(link: dict[str, Any]) -> str:
        nonlocal templated, non_templated
        href = link["href"]
        if link.get("templated"):
            templated = True
            if variables:
                href = expand(href, variables)
        else:
            non_templated = True
        if link.get("deprecation"):
            deprecations[link["deprecation"]] = None
        return href

    def embedded_href(document: dict[str, Any]) -> str | None:
        nonlocal non_templated
        non_templated = True
        return self_href(document)

    link_hrefs = for_each(resource.links.get(rel), link_href)
    embedded_hrefs = for_each(resource.embedded.get(rel), embedded_href)

    if templated and not variables:
        logger.warning(
            "Following templated link relation '%s' without variables", rel
        )
    if non_templated and variables:
        logger.warning(
            "Following non-templated link relation '%s' with variables", rel
        )
    for deprecation in deprecations:
        logger.warning(
            "Following deprecated link relation '%s': %s", rel, deprecation
        )

    if embedded_hrefs is None:
        return link_hrefs
    if link_hrefs is None:
        return embedded_hrefs
    return as_list(link_hrefs) + as_list(embedded_hrefs)


def resolve_relation(
    context: HalContext,
    resource: HalResource,
    rel: str,
    variables: dict[str, Any] | None = None,
) -> Resource | list[Resource] | None:
    """Follow a relation to the resource(s) it names in `context`."""
    hrefs = resolve_href(resource, rel, variables, expand=context.expand)
    return for_each(hrefs, context.get)


def resolve_property(
    context: HalContext, resource: HalResource, name: str
) -> Resource | list[Resource] | None:
    """Follow a property holding a URI (or list of URIs) to resource(s)."""
    return for_each(resource.properties.get(name), context.get)
