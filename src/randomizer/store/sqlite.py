"""SQLite-backed group store."""

from __future__ import annotations

import asyncio
import json
import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS groups("
    "partition TEXT NOT NULL, "
    "name TEXT NOT NULL, "
    "options_json TEXT NOT NULL, "
    "updated_at TEXT NOT NULL, "
    "PRIMARY KEY(partition, name))"
)


def connect(path: str) -> sqlite3.Connection:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    # Autocommit mode keeps write locks short when many requests hit the file.
    conn = sqlite3.connect(path, timeout=5.0, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    conn.execute("PRAGMA synchronous = NORMAL")
    conn.execute("PRAGMA busy_timeout = 5000")
    conn.execute(_SCHEMA)
    return conn


@contextmanager
def get_conn(path: str) -> Iterator[sqlite3.Connection]:
    conn = connect(path)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


class SQLiteStore:
    """Stores groups for one partition in a shared SQLite file.

    Calls run in a worker thread so a slow disk doesn't stall the event loop.
    """

    def __init__(self, path: str, partition: str) -> None:
        self.path = path
        self.partition = partition

    async def list(self) -> list[str]:
        return await asyncio.to_thread(self._list)

    async def get(self, group: str) -> list[str]:
        return await asyncio.to_thread(self._get, group)

    async def put(self, group: str, options: Sequence[str]) -> None:
        await asyncio.to_thread(self._put, group, list(options))

    async def delete(self, group: str) -> bool:
        return await asyncio.to_thread(self._delete, group)

    def _list(self) -> list[str]:
        with get_conn(self.path) as conn:
            rows = conn.execute(
                "SELECT name FROM groups WHERE partition=? ORDER BY name ASC",
                (self.partition,),
            ).fetchall()
        return [str(row["name"]) for row in rows]

    def _get(self, group: str) -> list[str]:
        with get_conn(self.path) as conn:
            row = conn.execute(
                "SELECT options_json FROM groups WHERE partition=? AND name=? LIMIT 1",
                (self.partition, group),
            ).fetchone()
        if row is None:
            return []
        decoded = json.loads(row["options_json"])
        return [str(item) for item in decoded]

    def _put(self, group: str, options: list[str]) -> None:
        with get_conn(self.path) as conn:
            conn.execute(
                (
                    "INSERT INTO groups(partition, name, options_json, updated_at) "
                    "VALUES(?,?,?,datetime('now')) "
                    "ON CONFLICT(partition, name) DO UPDATE SET "
                    "options_json=excluded.options_json, updated_at=excluded.updated_at"
                ),
                (self.partition, group, json.dumps(options)),
            )

    def _delete(self, group: str) -> bool:
        with get_conn(self.path) as conn:
            cursor = conn.execute(
                "DELETE FROM groups WHERE partition=? AND name=?",
                (self.partition, group),
            )
            return cursor.rowcount > 0
