# src/cache/cache_factory.py — v1
"""Factory for offline store instantiation."""

from __future__ import annotations

from halgraph.cache.base_resource_store import BaseResourceStore
from halgraph.config.settings import Settings


def create_resource_store(settings: Settings | None = None) -> BaseResourceStore:
    """Instantiate the configured store backend.

    Args:
        settings: Client settings. Defaults to the memory backend.

    Returns:
        Configured BaseResourceStore implementation.
    """
    backend = "memory" if settings is None else settings.cache_backend

    if backend == "memory":
        from halgraph.cache.memory_store import MemoryResourceStore
        return MemoryResourceStore()

    if backend == "sqlite":
        from halgraph.cache.sqlite_store import SqliteResourceStore
        return SqliteResourceStore(db_path=settings.sqlite_path)

    if backend == "redis":
        from halgraph.cache.redis_store import RedisResourceStore
        if not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when CACHE_BACKEND=redis"
            )
        return RedisResourceStore(
            redis_url=settings.cache_redis_url,
            key_prefix=settings.cache_key_prefix,
        )

    raise ValueError(f"Unsupported cache backend: {backend!r}")
