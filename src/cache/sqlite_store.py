# src/cache/sqlite_store.py — v1
"""SQLite-based store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency. Survives restarts, so requests
queued while offline can be replayed by a later process.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

from halgraph.cache.base_resource_store import BaseResourceStore
from halgraph.cache.models import CachedResource, QueuedRequest
from halgraph.core.errors import StoreError

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS resources (
    uri TEXT PRIMARY KEY,
    data TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS requests (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url TEXT NOT NULL,
    method TEXT NOT NULL,
    data TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_requests_url_method ON requests(url, method);
"""


class SqliteResourceStore(BaseResourceStore):
    """SQLite-backed store; one connection in autocommit mode."""

    def __init__(self, db_path: Path | str, timeout: float = 5.0) -> None:
        super().__init__()
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(self._db_path), timeout=timeout, isolation_level=None
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        self._depth = 0

    def _execute(self, sql: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, params)
        except sqlite3.OperationalError as e:
            event = "blocked" if "locked" in str(e).lower() else "error"
            self._emit(event, str(e))
            raise StoreError(f"SQLite operation failed: {e}") from e
        except sqlite3.DatabaseError as e:
            self._emit("error", str(e))
            raise StoreError(f"SQLite operation failed: {e}") from e

    async def get_resource(self, uri: str) -> CachedResource | None:
        row = self._execute(
            "SELECT data FROM resources WHERE uri = ?", (uri,)
        ).fetchone()
        if row is None:
            return None
        try:
            return CachedResource(**json.loads(row[0]))
        except Exception as e:
            logger.warning("Failed to deserialize cached resource %s: %s", uri, e)
            return None

    async def put_resource(self, entry: CachedResource) -> None:
        self._execute(
            "INSERT OR REPLACE INTO resources (uri, data) VALUES (?, ?)",
            (entry.uri, entry.model_dump_json()),
        )

    async def delete_resource(self, uri: str) -> None:
        self._execute("DELETE FROM resources WHERE uri = ?", (uri,))

    async def add_request(self, queued: QueuedRequest) -> int:
        cursor = self._execute(
            "INSERT INTO requests (url, method, data) VALUES (?, ?, ?)",
            (queued.url, queued.method, queued.model_dump_json(exclude={"id"})),
        )
        return int(cursor.lastrowid)

    async def list_requests(self) -> list[QueuedRequest]:
        rows = self._execute("SELECT id, data FROM requests ORDER BY id").fetchall()
        return [self._row_to_request(row) for row in rows]

    async def find_requests(self, url: str, method: str) -> list[QueuedRequest]:
        rows = self._execute(
            "SELECT id, data FROM requests WHERE url = ? AND method = ? ORDER BY id",
            (url, method),
        ).fetchall()
        return [self._row_to_request(row) for row in rows]

    async def delete_request(self, request_id: int) -> None:
        self._execute("DELETE FROM requests WHERE id = ?", (request_id,))

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._execute("BEGIN IMMEDIATE")
        self._depth = 1
        try:
            yield
        except BaseException:
            self._conn.execute("ROLLBACK")
            raise
        else:
            try:
                self._execute("COMMIT")
            except StoreError:
                self._conn.execute("ROLLBACK")
                raise
        finally:
            self._depth = 0

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    @staticmethod
    def _row_to_request(row: tuple[int, str]) -> QueuedRequest:
        queued = QueuedRequest(**json.loads(row[1]))
        return queued.model_copy(update={"id": row[0]})
