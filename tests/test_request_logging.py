"""
tests/test_request_logging.py -- Log level and body logging driven by Settings.

Covers:
  - The Settings passed to create_app() set the level of the testserver loggers,
    independent of the environment the module was imported under
  - log_bodies logs request and response bodies at DEBUG
  - Responses rebuilt by the body-logging middleware keep status and body,
    including an empty 204
"""

from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from core.config import Settings
from server import DEFAULT_PASSWORD, DEFAULT_USERNAME, TestServer
from tests.conftest import headers


@pytest.fixture(autouse=True)
def _restore_level():
    yield
    logging.getLogger("testserver").setLevel(logging.NOTSET)


def _body_logging_client(server: TestServer) -> TestClient:
    settings = Settings(_env_file=None, log_level="debug", log_bodies=True)
    return TestClient(create_app(server, settings=settings))


def _messages(caplog, marker: str) -> list[str]:
    return [r.getMessage() for r in caplog.records if r.name == "testserver.api" and marker in r.getMessage()]


class TestLogLevel:
    def test_settings_level_applies_to_server_loggers(self, server: TestServer) -> None:
        create_app(server, settings=Settings(_env_file=None, log_level="DEBUG"))
        assert logging.getLogger("testserver.api").isEnabledFor(logging.DEBUG)
        assert logging.getLogger("testserver.jobs").isEnabledFor(logging.DEBUG)

    def test_quieter_level_suppresses_info(self, server: TestServer) -> None:
        create_app(server, settings=Settings(_env_file=None, log_level="WARNING"))
        assert not logging.getLogger("testserver.api").isEnabledFor(logging.INFO)


class TestBodyLogging:
    def test_request_and_response_bodies_logged(self, server: TestServer, caplog) -> None:
        """No caplog.set_level: the level must come from Settings alone."""
        with _body_logging_client(server) as client:
            resp = client.post(
                "/v1/users/login",
                json={"username": DEFAULT_USERNAME, "password": DEFAULT_PASSWORD},
                headers=headers(),
            )
        assert resp.status_code == 200
        token = resp.json()["token"]

        reads = _messages(caplog, "read:")
        assert any("/v1/users/login" in m and DEFAULT_USERNAME in m for m in reads)
        wrote = _messages(caplog, "wrote:")
        assert any(token in m for m in wrote)

    def test_error_response_survives_rebuild(self, server: TestServer, caplog) -> None:
        with _body_logging_client(server) as client:
            resp = client.post("/v1/users/login", json={"username": "x", "password": "y"}, headers=headers())
        assert resp.status_code == 401
        assert resp.json() == {"errors": [{"code": "authentication_failed"}]}
        assert any("authentication_failed" in m for m in _messages(caplog, "wrote:"))

    def test_empty_204_survives_rebuild(self, server: TestServer) -> None:
        with _body_logging_client(server) as client:
            token = client.post(
                "/v1/users/login",
                json={"username": DEFAULT_USERNAME, "password": DEFAULT_PASSWORD},
                headers=headers(),
            ).json()["token"]
            resp = client.post("/v1/users/logout", headers=headers(token))
            assert resp.status_code == 204
            assert resp.content == b""
            assert client.get("/v1/accesses", headers=headers(token)).status_code == 401

    def test_bodies_not_logged_by_default(self, server: TestServer, caplog) -> None:
        settings = Settings(_env_file=None, log_level="DEBUG")
        with TestClient(create_app(server, settings=settings)) as client:
            client.post(
                "/v1/users/login",
                json={"username": DEFAULT_USERNAME, "password": DEFAULT_PASSWORD},
                headers=headers(),
            )
        assert _messages(caplog, "read:") == []
        assert _messages(caplog, "wrote:") == []
