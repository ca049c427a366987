"""
tests/test_health.py -- Integration tests for GET /health.

Covers:
  - 200 response with status, version, and components fields
  - components.database reports the items table reachability
"""

from __future__ import annotations

import inspect
from unittest.mock import patch

from api.main import health


def test_health_returns_200_with_components(api_client):
    """Health endpoint returns 200 with status, version, and components."""
    client, _ = api_client
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["version"]
    assert data["components"]["app"] == "ok"
    assert data["components"]["database"] == "ok"


def test_health_reports_database_error(api_client):
    """A table that fails its ping is reported, not raised."""
    client, table = api_client
    with patch.object(table, "ping", return_value=False):
        data = client.get("/health").json()
    assert data["components"]["database"] == "error"


def test_health_runs_in_threadpool():
    """ping() blocks on the database, so the handler must not be a coroutine."""
    assert not inspect.iscoroutinefunction(health)
