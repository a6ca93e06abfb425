# tests/conftest.py — v1
"""Shared test fixtures for all unit tests.

Provides a scripted transport, sample HAL documents, contexts wired to the
online and offline engines, and an in-memory store. No network I/O.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from halgraph.cache.memory_store import MemoryResourceStore
from halgraph.context.hal_context import HalContext
from halgraph.core.models import HAL_MEDIA_TYPE, HttpRequest, HttpResponse
from halgraph.core.profiles import ProfileRegistry
from halgraph.sync.http_sync_engine import HttpSyncEngine
from halgraph.sync.offline_sync_engine import OfflineSyncEngine
from halgraph.sync.reachability import ManualReachability
from halgraph.transport.base_transport import BaseTransport


PERSON_URI = "http://example.com/people/1"
CAR_URI = "http://example.com/cars/7"
ENGINE_URI = "http://example.com/engines/42"


class FakeTransport(BaseTransport):
    """Transport returning scripted responses and recording requests."""

    def __init__(self) -> None:
        self.requests: list[HttpRequest] = []
        self.responses: list[HttpResponse | Exception] = []
        self.closed = False

    def respond(self, *responses: HttpResponse | Exception) -> None:
        self.responses.extend(responses)

    async def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def aclose(self) -> None:
        self.closed = True


def hal_response(
    document: dict[str, Any] | None,
    status: int = 200,
    content_type: str = HAL_MEDIA_TYPE,
) -> HttpResponse:
    """Build a response carrying a HAL document."""
    body = json.dumps(document) if document is not None else None
    return HttpResponse(status=status, headers={"Content-Type": content_type}, body=body)


# === FIXTURES: Sample documents ===


@pytest.fixture
def person_document() -> dict[str, Any]:
    """Person embedding a car, which embeds an engine."""
    return {
        "name": "Ada",
        "age": 36,
        "_links": {
            "self": {"href": PERSON_URI},
            "friends": [
                {"href": "http://example.com/people/2"},
                {"href": "http://example.com/people/3"},
            ],
            "search": {"href": "http://example.com/people{?q}", "templated": True},
        },
        "_embedded": {
            "car": {
                "model": "Roadster",
                "_links": {"self": {"href": CAR_URI}},
                "_embedded": {
                    "engine": {
                        "power": 180,
                        "_links": {"self": {"href": ENGINE_URI}},
                    },
                },
            },
        },
    }


# === FIXTURES: Wiring ===


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def registry() -> ProfileRegistry:
    return ProfileRegistry()


@pytest.fixture
def store() -> MemoryResourceStore:
    return MemoryResourceStore()


@pytest.fixture
def reachability() -> ManualReachability:
    return ManualReachability(offline=False)


@pytest.fixture
def http_engine(transport: FakeTransport) -> HttpSyncEngine:
    return HttpSyncEngine(transport)


@pytest.fixture
def offline_engine(
    transport: FakeTransport,
    store: MemoryResourceStore,
    reachability: ManualReachability,
) -> OfflineSyncEngine:
    return OfflineSyncEngine(transport, store, reachability)


@pytest.fixture
def context(http_engine: HttpSyncEngine, registry: ProfileRegistry) -> HalContext:
    return HalContext(http_engine, profiles=registry)


@pytest.fixture
def offline_context(
    offline_engine: OfflineSyncEngine, registry: ProfileRegistry
) -> HalContext:
    return HalContext(offline_engine, profiles=registry)


@pytest.fixture
def make_response():
    """Factory for HAL responses (see `hal_response`)."""
    return hal_response
