# tests/unit/sync/test_offline_sync_engine.py — v1
"""Tests for sync/offline_sync_engine.py — cache, queue and replay."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from halgraph.cache.models import CachedResource
from halgraph.context.hal_context import HalContext
from halgraph.core.errors import TransportError
from halgraph.core.models import HttpResponse
from halgraph.sync.offline_sync_engine import OfflineSyncEngine

PERSON_URI = "http://example.com/people/1"
CAR_URI = "http://example.com/cars/7"


def _doc(uri, **properties):
    return {**properties, "_links": {"self": {"href": uri}}}


class TestOnline:
    @pytest.mark.asyncio
    async def test_get_writes_through(self, offline_context, transport, store, make_response, person_document):
        transport.respond(make_response(person_document))
        person = await offline_context.get(PERSON_URI).get()

        cached = await store.get_resource(PERSON_URI)
        assert cached is not None
        assert cached.data["name"] == "Ada"
        assert cached.sync_time == person.sync_time
        assert await store.get_resource(CAR_URI) is not None

    @pytest.mark.asyncio
    async def test_put_writes_through(self, offline_context, transport, store):
        transport.respond(HttpResponse(status=204))
        resource = offline_context.get("http://x/1")
        resource.properties["a"] = 1
        await resource.put()
        cached = await store.get_resource("http://x/1")
        assert cached.data["a"] == 1
        assert cached.sync_time is not None

    @pytest.mark.asyncio
    async def test_delete_evicts(self, offline_context, transport, store, make_response):
        transport.respond(make_response(_doc("http://x/1", a=1)), HttpResponse(status=204))
        resource = offline_context.get("http://x/1")
        await resource.get()
        await resource.delete()
        assert await store.get_resource("http://x/1") is None
        assert resource.sync_time is None

    @pytest.mark.asyncio
    async def test_post_not_cached(self, offline_context, transport, store):
        transport.respond(HttpResponse(status=201))
        response = await offline_context.get("http://x/1").post({"a": 1})
        assert response.status == 201
        assert await store.get_resource("http://x/1") is None
        assert await store.list_requests() == []

    @pytest.mark.asyncio
    async def test_failed_get_not_cached(self, offline_context, transport, store):
        transport.respond(TransportError("down"))
        with pytest.raises(TransportError):
            await offline_context.get("http://x/1").get()
        assert await store.get_resource("http://x/1") is None


class TestOffline:
    @pytest.mark.asyncio
    async def test_put_queues_exactly_one_request(self, offline_context, transport, store, reachability):
        reachability.set_offline(True)
        resource = offline_context.get("http://x/1")
        resource.properties["a"] = 1

        await resource.put()

        assert transport.requests == []
        queued = await store.list_requests()
        assert len(queued) == 1
        assert queued[0].method == "put"
        assert queued[0].url == "http://x/1"
        assert queued[0].request.body["a"] == 1

    @pytest.mark.asyncio
    async def test_put_applies_local_effect(self, offline_context, store, reachability):
        reachability.set_offline(True)
        resource = offline_context.get("http://x/1")
        resource.properties["a"] = 1
        await resource.put_state()
        cached = await store.get_resource("http://x/1")
        assert cached.data["a"] == 1
        assert cached.sync_time is None
        assert resource.sync_time is None

    @pytest.mark.asyncio
    async def test_get_from_cache(self, offline_context, transport, store, reachability, person_document):
        synced_at = datetime(2026, 1, 2, tzinfo=timezone.utc)
        await store.put_resource(CachedResource(
            uri=PERSON_URI, data=person_document, sync_time=synced_at, cached_at=synced_at,
        ))
        reachability.set_offline(True)

        person = await offline_context.get(PERSON_URI).get()

        assert transport.requests == []
        assert person.properties["name"] == "Ada"
        assert person.sync_time == synced_at
        assert offline_context.get(CAR_URI).properties == {"model": "Roadster"}

    @pytest.mark.asyncio
    async def test_get_absent_returns_unpopulated(self, offline_context, transport, reachability):
        reachability.set_offline(True)
        resource = await offline_context.get("http://x/missing").get()
        assert resource.properties == {}
        assert resource.sync_time is None
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_read_after_offline_put(self, offline_context, reachability, registry, transport):
        reachability.set_offline(True)
        resource = offline_context.get("http://x/1")
        resource.properties["a"] = 2
        await resource.put()

        fresh = HalContext(offline_context.engine, profiles=registry)
        loaded = await fresh.get("http://x/1").get()
        assert loaded.properties == {"a": 2}
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_delete_queues_and_evicts(self, offline_context, store, reachability):
        await store.put_resource(CachedResource(
            uri="http://x/1", data=_doc("http://x/1"),
            sync_time=None, cached_at=datetime.now(timezone.utc),
        ))
        reachability.set_offline(True)
        await offline_context.get("http://x/1").delete()

        assert await store.get_resource("http://x/1") is None
        queued = await store.list_requests()
        assert [q.method for q in queued] == ["delete"]

    @pytest.mark.asyncio
    async def test_post_queued_only(self, offline_context, store, reachability):
        reachability.set_offline(True)
        result = await offline_context.get("http://x/1").post({"a": 1})
        assert result is None
        assert await store.get_resource("http://x/1") is None
        assert [q.method for q in await store.list_requests()] == ["post"]

    @pytest.mark.asyncio
    async def test_reachability_sampled_per_operation(self, offline_context, transport, store, reachability):
        reachability.set_offline(True)
        resource = offline_context.get("http://x/1")
        await resource.put()
        reachability.set_offline(False)
        transport.respond(HttpResponse(status=204))
        await resource.put()
        assert len(transport.requests) == 1
        assert len(await store.list_requests()) == 1


class TestCoalescing:
    @pytest.mark.asyncio
    async def test_put_replaces_earlier_put(self, offline_context, store, reachability):
        reachability.set_offline(True)
        resource = offline_context.get("http://x/1")
        resource.properties["v"] = 1
        await resource.put()
        resource.properties["v"] = 2
        await resource.put()

        queued = await store.list_requests()
        assert len(queued) == 1
        assert queued[0].request.body["v"] == 2

    @pytest.mark.asyncio
    async def test_delete_drops_pending_puts(self, offline_context, store, reachability):
        reachability.set_offline(True)
        resource = offline_context.get("http://x/1")
        await resource.put()
        await resource.delete()
        assert [q.method for q in await store.list_requests()] == ["delete"]

    @pytest.mark.asyncio
    async def test_posts_never_coalesced(self, offline_context, store, reachability):
        reachability.set_offline(True)
        resource = offline_context.get("http://x/1")
        await resource.post({"n": 1})
        await resource.post({"n": 2})
        assert len(await store.list_requests()) == 2

    @pytest.mark.asyncio
    async def test_coalescing_disabled(self, transport, store, reachability, registry):
        engine = OfflineSyncEngine(transport, store, reachability, coalesce_requests=False)
        context = HalContext(engine, profiles=registry)
        reachability.set_offline(True)
        resource = context.get("http://x/1")
        await resource.put()
        await resource.put()
        assert len(await store.list_requests()) == 2


class TestReplay:
    @pytest.mark.asyncio
    async def test_replay_sends_in_order(self, offline_context, offline_engine, transport, store, reachability):
        reachability.set_offline(True)
        await offline_context.get("http://x/1").put()
        await offline_context.get("http://x/2").delete()
        await offline_context.get("http://x/3").post({"n": 1})

        reachability.set_offline(False)
        transport.respond(*[HttpResponse(status=204)] * 3)
        sent = await offline_engine.replay()

        assert sent == 3
        assert [(r.method, r.url) for r in transport.requests] == [
            ("put", "http://x/1"), ("delete", "http://x/2"), ("post", "http://x/3"),
        ]
        assert await offline_engine.pending_requests() == []

    @pytest.mark.asyncio
    async def test_replay_stops_at_first_failure(self, offline_context, offline_engine, transport, reachability):
        reachability.set_offline(True)
        await offline_context.get("http://x/1").put()
        await offline_context.get("http://x/2").put()

        reachability.set_offline(False)
        transport.respond(TransportError("down"))
        with pytest.raises(TransportError):
            await offline_engine.replay()

        pending = await offline_engine.pending_requests()
        assert [q.url for q in pending] == ["http://x/1", "http://x/2"]

    @pytest.mark.asyncio
    async def test_replay_while_offline(self, offline_context, offline_engine, transport, reachability):
        reachability.set_offline(True)
        await offline_context.get("http://x/1").put()
        assert await offline_engine.replay() == 0
        assert transport.requests == []
