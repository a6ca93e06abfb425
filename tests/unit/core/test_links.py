# tests/unit/core/test_links.py — v1
"""Tests for core/links.py — href resolution and usage warnings."""

from __future__ import annotations

import logging

import pytest

from halgraph.core.links import as_list, for_each, resolve_href, self_href

LOGGER = "halgraph.core.links"


def _resource(context, links=None, embedded=None, **properties):
    resource = context.get("http://x/root")
    resource.replace_state({
        **properties,
        "_links": {"self": {"href": "http://x/root"}, **(links or {})},
        "_embedded": embedded or {},
    })
    return resource


class TestHelpers:
    def test_for_each_scalar(self):
        assert for_each(2, lambda v: v * 10) == 20

    def test_for_each_list_keeps_shape(self):
        assert for_each([1, 2], lambda v: v * 10) == [10, 20]

    def test_for_each_none(self):
        assert for_each(None, lambda v: v) is None

    def test_as_list(self):
        assert as_list(None) == []
        assert as_list("a") == ["a"]
        assert as_list(["a", "b"]) == ["a", "b"]

    def test_self_href(self):
        assert self_href({"_links": {"self": {"href": "http://x/1"}}}) == "http://x/1"

    def test_self_href_missing(self):
        assert self_href({"name": "no links"}) is None
        assert self_href({"_links": {}}) is None


class TestResolveHref:
    def test_single_link(self, context):
        resource = _resource(context, links={"example": {"href": "http://x/1"}})
        assert resolve_href(resource, "example") == "http://x/1"

    def test_link_array(self, context):
        resource = _resource(
            context,
            links={"example": [{"href": "http://x/1"}, {"href": "http://x/2"}]},
        )
        assert resolve_href(resource, "example") == ["http://x/1", "http://x/2"]

    def test_unknown_rel(self, context):
        resource = _resource(context)
        assert resolve_href(resource, "missing") is None

    def test_templated_expansion(self, context):
        resource = _resource(
            context, links={"example": {"href": "http://x/{id}", "templated": True}}
        )
        assert resolve_href(resource, "example", {"id": "1"}) == "http://x/1"

    def test_templated_without_variables_warns_once(self, context, caplog):
        resource = _resource(
            context, links={"example": {"href": "http://x/{id}", "templated": True}}
        )
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            href = resolve_href(resource, "example")
        assert href == "http://x/{id}"
        warnings = [r for r in caplog.records if r.name == LOGGER]
        assert len(warnings) == 1
        assert "without variables" in warnings[0].getMessage()

    def test_variables_on_plain_link_warn(self, context, caplog):
        resource = _resource(context, links={"example": {"href": "http://x/1"}})
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            href = resolve_href(resource, "example", {"id": "1"})
        assert href == "http://x/1"
        assert "with variables" in caplog.text

    def test_deprecation_warned_once_per_uri(self, context, caplog):
        resource = _resource(
            context,
            links={"old": [
                {"href": "http://x/1", "deprecation": "http://docs/old"},
                {"href": "http://x/2", "deprecation": "http://docs/old"},
            ]},
        )
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            resolve_href(resource, "old")
        warnings = [r for r in caplog.records if r.name == LOGGER]
        assert len(warnings) == 1
        assert warnings[0].getMessage().count("http://docs/old") == 1

    def test_one_warning_per_distinct_deprecation(self, context, caplog):
        resource = _resource(
            context,
            links={"old": [
                {"href": "http://x/1", "deprecation": "http://docs/a"},
                {"href": "http://x/2", "deprecation": "http://docs/b"},
                {"href": "http://x/3", "deprecation": "http://docs/a"},
            ]},
        )
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            resolve_href(resource, "old")
        messages = [r.getMessage() for r in caplog.records if r.name == LOGGER]
        assert len(messages) == 2
        assert "http://docs/a" in messages[0]
        assert "http://docs/b" in messages[1]

    def test_embedded_contributes_self_href(self, context):
        resource = _resource(
            context,
            embedded={"car": {"_links": {"self": {"href": "http://x/car"}}}},
        )
        assert resolve_href(resource, "car") == "http://x/car"

    def test_embedded_with_variables_warns(self, context, caplog):
        resource = _resource(
            context,
            embedded={"car": {"_links": {"self": {"href": "http://x/car"}}}},
        )
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            resolve_href(resource, "car", {"id": "1"})
        assert "with variables" in caplog.text

    def test_links_then_embedded_concatenated(self, context):
        resource = _resource(
            context,
            links={"item": {"href": "http://x/1"}},
            embedded={"item": [
                {"_links": {"self": {"href": "http://x/2"}}},
                {"_links": {"self": {"href": "http://x/3"}}},
            ]},
        )
        assert resolve_href(resource, "item") == ["http://x/1", "http://x/2", "http://x/3"]

    def test_custom_expander(self, context):
        resource = _resource(
            context, links={"example": {"href": "http://x/{id}", "templated": True}}
        )
        href = resolve_href(
            resource, "example", {"id": "9"},
            expand=lambda template, variables: template.replace("{id}", variables["id"]),
        )
        assert href == "http://x/9"


class TestResolveRelation:
    def test_relation_uses_identity_map(self, context):
        resource = _resource(context, links={"example": {"href": "http://x/1"}})
        target = resource.rel("example")
        assert target is context.get("http://x/1")

    def test_relation_list(self, context):
        resource = _resource(
            context,
            links={"example": [{"href": "http://x/1"}, {"href": "http://x/2"}]},
        )
        targets = resource.rel("example")
        assert [t.uri for t in targets] == ["http://x/1", "http://x/2"]

    def test_relation_missing(self, context):
        assert _resource(context).rel("missing") is None

    @pytest.mark.parametrize("value,expected", [
        ("http://x/1", "http://x/1"),
        (["http://x/1", "http://x/2"], ["http://x/1", "http://x/2"]),
    ])
    def test_property_holding_uris(self, context, value, expected):
        resource = _resource(context, owner=value)
        result = resource.prop("owner")
        if isinstance(expected, list):
            assert [r.uri for r in result] == expected
        else:
            assert result.uri == expected

    def test_property_missing(self, context):
        assert _resource(context).prop("owner") is None
