"""
tests/conftest.py -- Shared test fixtures for the inventory tests.

This module provides:
  - make_form / make_item_body: factories for valid inputs, overridable per test
  - local_store: LocalAssetStore on a temp file
  - table: RemoteTable on a private in-memory SQLite DB
  - api_client: TestClient with a patched lifespan and an isolated items table

Design: the API fixture uses a named shared-memory SQLite URI (not plain
:memory:) because TestClient runs sync route handlers in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

Registry coroutines are driven with asyncio.run; no async pytest plugin needed.
"""

from __future__ import annotations

import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from api.main import app
from inventory.local_store import LocalAssetStore
from inventory.table import RemoteTable

# Rate limits are exercised in production only; the suite posts far more than
# 30 items a minute from the same client address.
limiter.enabled = False


def _form(**overrides) -> dict[str, str]:
    data = {
        "brand": "Dell",
        "serial_number": "SN1",
        "asset_tag": "100",
        "model": "Notebook",
        "ram_spec": "8GBDDR4",
        "processor": "Intel Core i5-8250U",
        "motherboard": "Dell 0XYZ12",
        "storage": "SSD 256GB",
        "location": "secretaria",
        "sector": "TI",
    }
    data.update(overrides)
    return data


def _item_body(**overrides) -> dict[str, str]:
    data = {
        "brand": "Positivo",
        "serialNumber": "API-SN-1",
        "assetTag": "5001",
        "model": "Desktop",
        "ram": "4GBDDR3",
        "processor": "Intel Celeron J1800",
        "motherboard": "Positivo POS-EIB75CO",
        "storage": "HDD 500GB",
        "location": "escola_tunel",
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_form():
    """Factory for a valid raw form (AssetInput attribute names) with overrides applied."""
    return _form


@pytest.fixture
def make_item_body():
    """Factory for a valid POST /items JSON body with overrides applied."""
    return _item_body


@pytest.fixture
def local_store(tmp_path) -> Generator[LocalAssetStore, None, None]:
    store = LocalAssetStore(tmp_path / "local.db")
    yield store
    store.close()


@pytest.fixture
def table() -> Generator[RemoteTable, None, None]:
    # Named shared-memory DB: TableMirror calls the table from a worker thread.
    t = RemoteTable(f"sqlite:///file:test_items_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true")
    yield t
    t.close()


def _patch_lifespan(table: RemoteTable):
    """Return an async context manager that replaces the real lifespan.

    Wires the pre-created test table into app.state so TestClient routes see
    an isolated database rather than the configured one.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.table = table
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, RemoteTable], None, None]:
    """Yield (client, table) for API integration tests.

    One TestClient per test module for speed. Tests that need a known state
    use serial numbers and asset tags unique to the test.
    """
    table = RemoteTable("sqlite:///file:test_items_api?mode=memory&cache=shared&uri=true")
    app.router.lifespan_context = _patch_lifespan(table)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, table

    table.close()
