"""
inventory/local_store.py -- SQLite-backed local persistent store for asset records.

The operator's authoritative copy of the inventory. One table keyed by serial
number; each value is the full record serialized as JSON (camelCase keys,
registeredAt included). The file survives restarts.

Every operation is a coroutine. The blocking sqlite3 call runs in a worker
thread via asyncio.to_thread, inside one transaction scoped to the key touched.
A failed transaction is rolled back and surfaces as LocalStoreError.

Schema versioning: PRAGMA user_version holds a single integer checked when the
connection is opened. The upgrade step runs at most once per store lifetime and
is idempotent (CREATE TABLE IF NOT EXISTS). A file written by a newer schema is
refused rather than guessed at.

Usage:
    store = LocalAssetStore(Path("data/inventory_local.db"))
    await store.put(record)
    records = await store.get_all()
    await store.delete("SN1")
    store.close()
"""

import asyncio
import json
import sqlite3
import threading
from pathlib import Path
from typing import Optional, Union

from core.errors import LocalStoreError
from inventory.models import AssetRecord

SCHEMA_VERSION = 1

_DDL = """
CREATE TABLE IF NOT EXISTS items (
    serial_number   TEXT PRIMARY KEY,
    data            TEXT NOT NULL
);
"""


class LocalAssetStore:
    def __init__(self, db_path: Union[Path, str]) -> None:
        self.db_path = str(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        # sqlite3 connections are shared across to_thread workers; serialize access.
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Connection + schema
    # ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        """Open the connection and run the schema upgrade on first use."""
        if self._conn is not None:
            return self._conn
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            try:
                conn.execute("PRAGMA journal_mode=WAL")
                _upgrade(conn)
            except (sqlite3.Error, LocalStoreError):
                conn.close()
                raise
        except sqlite3.Error as e:
            raise LocalStoreError(f"Could not open local store {self.db_path}: {e}") from e
        self._conn = conn
        return conn

    async def initialize(self) -> None:
        """Open the store eagerly. Safe to call more than once."""
        await asyncio.to_thread(self._locked, self._connect)

    def _locked(self, fn, *args):
        with self._lock:
            return fn(*args)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _put(self, record: AssetRecord) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    "INSERT OR REPLACE INTO items (serial_number, data) VALUES (?, ?)",
                    (record.serial_number, json.dumps(record.to_dict(), ensure_ascii=False)),
                )
        except sqlite3.Error as e:
            raise LocalStoreError(f"Could not save item {record.serial_number!r}: {e}") from e

    def _get_all(self) -> list[AssetRecord]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT data FROM items").fetchall()
        except sqlite3.Error as e:
            raise LocalStoreError(f"Could not load items: {e}") from e
        try:
            return [AssetRecord.from_dict(json.loads(data)) for (data,) in rows]
        except ValueError as e:
            raise LocalStoreError(f"Local store holds an unreadable item: {e}") from e

    def _delete(self, serial_number: str) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute("DELETE FROM items WHERE serial_number = ?", (serial_number,))
        except sqlite3.Error as e:
            raise LocalStoreError(f"Could not delete item {serial_number!r}: {e}") from e

    async def put(self, record: AssetRecord) -> None:
        """Insert or overwrite the record stored under its serial number."""
        await asyncio.to_thread(self._locked, self._put, record)

    async def get_all(self) -> list[AssetRecord]:
        """Return every stored record, in no particular order."""
        return await asyncio.to_thread(self._locked, self._get_all)

    async def delete(self, serial_number: str) -> None:
        """Remove the record stored under serial_number. Missing keys are a no-op."""
        await asyncio.to_thread(self._locked, self._delete, serial_number)

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


# ---------------------------------------------------------------------------
# Migration
# ---------------------------------------------------------------------------


def schema_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version").fetchone()[0]


def _upgrade(conn: sqlite3.Connection) -> None:
    """Bring the schema up to SCHEMA_VERSION.

    PRAGMA user_version does not accept bound parameters; SCHEMA_VERSION is a
    module constant, not user input.
    """
    version = schema_version(conn)
    if version > SCHEMA_VERSION:
        raise LocalStoreError(
            f"Local store schema version {version} is newer than supported version {SCHEMA_VERSION}."
        )
    if version == SCHEMA_VERSION:
        return
    with conn:
        conn.execute(_DDL)
        conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
