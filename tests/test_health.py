"""
tests/test_health.py -- Integration tests for GET /v1/health.

Covers:
  - 200 response with status, version, and table sizes
  - Table sizes follow the server state
  - No authentication required
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from api.main import VERSION, create_app
from core.config import Settings
from server import TestServer


def test_health_returns_200_with_tables(api_client):
    """Health endpoint returns 200 with status, version, and tables."""
    client, _ = api_client
    resp = client.get("/v1/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["version"] == VERSION
    assert data["tables"]["applications"] == 1
    assert data["tables"]["users"] == 1
    assert data["tables"]["providers"] == 1


def test_health_tracks_new_users(api_client):
    client, server = api_client
    server.create_user("testapplication", "fred", "pw")
    data = client.get("/v1/health").json()
    assert data["tables"]["users"] == 2
    assert data["tables"]["tokens"] == 1


def test_health_no_auth_required(api_client):
    """Health endpoint is accessible without any authentication headers."""
    client, _ = api_client
    resp = client.get("/v1/health", headers={})
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_lifespan_builds_empty_server_without_defaults():
    """With seed_defaults off and no server passed in, startup creates an empty one."""
    app = create_app(settings=Settings(seed_defaults=False))
    with TestClient(app) as client:
        assert isinstance(app.state.server, TestServer)
        tables = client.get("/v1/health").json()["tables"]
    assert all(count == 0 for count in tables.values())


def test_lifespan_builds_default_server():
    app = create_app(settings=Settings())
    with TestClient(app) as client:
        tables = client.get("/v1/health").json()["tables"]
    assert tables["users"] == 1
