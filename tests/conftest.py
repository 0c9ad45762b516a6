"""
tests/conftest.py -- Shared fixtures for the test server's unit and integration tests.

This module provides:
  - server:     a fresh TestServer with the default fixture loaded
  - api_client: (client, server) -- TestClient over create_app(server)
  - headers():  builds the X-Application-Id / X-Token header dict
  - bank1:      registers the "bank1" provider used by the end-to-end scenario

Design: every fixture is function-scoped. The server is a stateful
in-memory double, so sharing one instance across tests would leak users,
tokens and jobs between them. Building a TestServer costs microseconds.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from core.models import Access, Account
from server import DEFAULT_APPLICATION_ID, TestServer, new_with_defaults

BANK1_CHALLENGES = {"login": "u1", "pin": "1234"}


def headers(token: Optional[str] = None, app_id: Optional[str] = DEFAULT_APPLICATION_ID) -> dict[str, str]:
    """Return request headers for app_id and, when given, a session token."""
    h: dict[str, str] = {}
    if app_id is not None:
        h["X-Application-Id"] = app_id
    if token is not None:
        h["X-Token"] = token
    return h


def bank1_access() -> Access:
    return Access(
        id="access-bank1",
        provider_id="bank1",
        name="default access",
        accounts=[
            Account(id="acc-1", name="Checking", number="0001", iban="DE02120300000000202051", supported=True),
            Account(id="acc-2", name="Savings", number="0002", iban="DE02500105170137075030", supported=False),
        ],
    )


@pytest.fixture
def server() -> TestServer:
    return new_with_defaults()


@pytest.fixture
def bank1(server: TestServer) -> TestServer:
    """The default server with provider "bank1" ({login: u1, pin: 1234}) registered."""
    server.register_access_provider("bank1", bank1_access(), BANK1_CHALLENGES)
    return server


@pytest.fixture
def api_client(server: TestServer) -> Generator[tuple[TestClient, TestServer], None, None]:
    """Yield (client, server) for HTTP integration tests.

    The TestClient runs the real FastAPI app, so tests hit real route
    handlers, dependency injection and exception handlers. The server object
    is returned alongside so tests can register providers or inspect state
    directly.
    """
    app = create_app(server)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, server
