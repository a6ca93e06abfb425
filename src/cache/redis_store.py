# src/cache/redis_store.py — v1
"""Redis-based store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Shares one offline cache between processes of the same user.

Layout under the key prefix:
    <prefix>:resources:<uri>   JSON of CachedResource
    <prefix>:requests          hash id -> JSON of QueuedRequest
    <prefix>:requests:order    sorted set of ids (score = id)
    <prefix>:requests:seq      id counter

Inside `transaction()` writes are buffered in a MULTI/EXEC pipeline; reads
still go to the server and do not see the buffered writes.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from halgraph.cache.base_resource_store import BaseResourceStore
from halgraph.cache.models import CachedResource, QueuedRequest
from halgraph.core.errors import StoreError

logger = logging.getLogger(__name__)


class RedisResourceStore(BaseResourceStore):
    """Redis-backed store."""

    def __init__(
        self,
        redis_url: str = "",
        *,
        key_prefix: str = "halgraph",
        client: Any = None,
    ) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        super().__init__()
        self._errors = redis.exceptions.RedisError
        self._client = client or redis.Redis.from_url(redis_url, decode_responses=True)
        self._prefix = key_prefix
        self._pipe: Any = None
        self._depth = 0

    def _resource_key(self, uri: str) -> str:
        return f"{self._prefix}:resources:{uri}"

    @property
    def _requests_key(self) -> str:
        return f"{self._prefix}:requests"

    @property
    def _writer(self) -> Any:
        return self._pipe if self._pipe is not None else self._client

    def _call(self, fn: Any, *args: Any) -> Any:
        try:
            return fn(*args)
        except self._errors as e:
            self._emit("error", str(e))
            raise StoreError(f"Redis operation failed: {e}") from e

    async def get_resource(self, uri: str) -> CachedResource | None:
        data = self._call(self._client.get, self._resource_key(uri))
        if data is None:
            return None
        try:
            return CachedResource(**json.loads(data))
        except Exception as e:
            logger.warning("Failed to deserialize cached resource %s: %s", uri, e)
            return None

    async def put_resource(self, entry: CachedResource) -> None:
        self._call(self._writer.set, self._resource_key(entry.uri), entry.model_dump_json())

    async def delete_resource(self, uri: str) -> None:
        self._call(self._writer.delete, self._resource_key(uri))

    async def add_request(self, queued: QueuedRequest) -> int:
        request_id = int(self._call(self._client.incr, f"{self._requests_key}:seq"))
        payload = queued.model_dump_json(exclude={"id"})
        self._call(self._writer.hset, self._requests_key, str(request_id), payload)
        self._call(
            self._writer.zadd, f"{self._requests_key}:order", {str(request_id): request_id}
        )
        return request_id

    async def list_requests(self) -> list[QueuedRequest]:
        ids = self._call(self._client.zrange, f"{self._requests_key}:order", 0, -1)
        requests: list[QueuedRequest] = []
        for request_id in ids:
            data = self._call(self._client.hget, self._requests_key, request_id)
            if data is None:
                continue
            queued = QueuedRequest(**json.loads(data))
            requests.append(queued.model_copy(update={"id": int(request_id)}))
        return requests

    async def delete_request(self, request_id: int) -> None:
        self._call(self._writer.hdel, self._requests_key, str(request_id))
        self._call(self._writer.zrem, f"{self._requests_key}:order", str(request_id))

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._pipe = self._client.pipeline(transaction=True)
        self._depth = 1
        try:
            yield
            self._call(self._pipe.execute)
        except BaseException:
            self._pipe.reset()
            raise
        finally:
            self._pipe = None
            self._depth = 0

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
