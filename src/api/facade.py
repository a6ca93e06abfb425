# src/api/facade.py — v1
"""Public API facade: wire transport, store, reachability and engine.

Usage:
    from halgraph.api.facade import create_context
    context = create_context()
    person = await context.open("https://api.example.com/people/1")
    car = person.rel("car")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from halgraph.config.settings import Settings
from halgraph.context.hal_context import HalContext, ResourceFactory
from halgraph.sync.base_sync_engine import BaseSyncEngine

if TYPE_CHECKING:
    from halgraph.cache.base_resource_store import BaseResourceStore
    from halgraph.core.links import Expander
    from halgraph.core.profiles import ProfileRegistry
    from halgraph.sync.reachability import BaseReachability
    from halgraph.transport.base_transport import BaseTransport

logger = logging.getLogger(__name__)


def create_engine(
    settings: Settings | None = None,
    *,
    transport: BaseTransport | None = None,
    store: BaseResourceStore | None = None,
    reachability: BaseReachability | None = None,
) -> BaseSyncEngine:
    """Build the sync engine described by `settings`.

    An offline engine is built when offline mode is enabled or when a store
    or reachability signal is passed explicitly.

    Args:
        settings: Client settings. Loaded from .env if None.
        transport: HTTP transport. Defaults to HttpxTransport.
        store: Offline store. Defaults to the configured cache backend.
        reachability: Offline signal. Defaults to ManualReachability.

    Returns:
        HttpSyncEngine or OfflineSyncEngine.
    """
    settings = settings or Settings()
    if transport is None:
        from halgraph.transport.httpx_transport import HttpxTransport
        transport = HttpxTransport(settings=settings)

    offline = settings.offline_enabled or store is not None or reachability is not None
    if not offline:
        from halgraph.sync.http_sync_engine import HttpSyncEngine
        return HttpSyncEngine(transport)

    from halgraph.cache.cache_factory import create_resource_store
    from halgraph.sync.offline_sync_engine import OfflineSyncEngine
    from halgraph.sync.reachability import ManualReachability

    if store is None:
        store = create_resource_store(settings)
    if reachability is None:
        reachability = ManualReachability(offline=settings.start_offline)
    logger.debug("Offline mode enabled (%s store)", type(store).__name__)
    return OfflineSyncEngine(
        transport,
        store,
        reachability,
        coalesce_requests=settings.offline_coalesce_requests,
    )


def create_context(
    settings: Settings | None = None,
    *,
    profiles: ProfileRegistry | None = None,
    transport: BaseTransport | None = None,
    store: BaseResourceStore | None = None,
    reachability: BaseReachability | None = None,
    resource_factory: ResourceFactory | None = None,
    expand: Expander | None = None,
) -> HalContext:
    """Create a HalContext with an engine built from `settings`."""
    settings = settings or Settings()
    engine = create_engine(
        settings, transport=transport, store=store, reachability=reachability
    )
    return HalContext(
        engine,
        resource_factory=resource_factory,
        profiles=profiles,
        expand=expand,
        backfill_links=settings.backfill_embedded_links,
    )
