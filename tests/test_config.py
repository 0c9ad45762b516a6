"""Tests for core/config.py and the command-line overlay in main.py."""

import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings
from main import _build_parser, _build_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "TESTSERVER_DEBUG",
        "TESTSERVER_HOST",
        "TESTSERVER_LOG_BODIES",
        "TESTSERVER_LOG_LEVEL",
        "TESTSERVER_PORT",
        "TESTSERVER_SSL_CERTFILE",
        "TESTSERVER_SSL_KEYFILE",
        "TESTSERVER_SEED_DEFAULTS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.port == 8443
    assert settings.log_level == "INFO"
    assert settings.seed_defaults is True
    assert settings.tls_enabled is False


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("TESTSERVER_PORT", "9001")
    monkeypatch.setenv("TESTSERVER_SEED_DEFAULTS", "false")
    settings = Settings(_env_file=None)
    assert settings.port == 9001
    assert settings.seed_defaults is False


def test_log_level_normalized():
    assert Settings(_env_file=None, log_level="warning").log_level == "WARNING"


def test_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="chatty")


def test_debug_forces_debug_level():
    assert Settings(_env_file=None, debug=True, log_level="ERROR").log_level == "DEBUG"


@pytest.mark.parametrize(
    "certfile, keyfile",
    [("cert.pem", None), (None, "key.pem")],
)
def test_half_configured_tls_rejected(certfile, keyfile):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, ssl_certfile=certfile, ssl_keyfile=keyfile)


def test_tls_enabled():
    settings = Settings(_env_file=None, ssl_certfile="cert.pem", ssl_keyfile="key.pem")
    assert settings.tls_enabled is True


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


class TestCommandLineOverlay:
    def test_flags_overlay_environment(self, monkeypatch):
        monkeypatch.setenv("TESTSERVER_PORT", "9100")
        args = _build_parser().parse_args(["--host", "0.0.0.0", "--log-level", "debug", "--log-bodies"])
        settings = _build_settings(args)
        assert settings.port == 9100
        assert settings.host == "0.0.0.0"
        assert settings.log_level == "DEBUG"
        assert settings.log_bodies is True
        assert settings.seed_defaults is True

    def test_flag_beats_environment(self, monkeypatch):
        monkeypatch.setenv("TESTSERVER_PORT", "9100")
        settings = _build_settings(_build_parser().parse_args(["--port", "9200", "--no-defaults"]))
        assert settings.port == 9200
        assert settings.seed_defaults is False

    def test_no_flags_keeps_environment(self, monkeypatch):
        monkeypatch.setenv("TESTSERVER_LOG_LEVEL", "warning")
        settings = _build_settings(_build_parser().parse_args([]))
        assert settings.log_level == "WARNING"
        assert settings.log_bodies is False

    def test_tls_flags(self):
        settings = _build_settings(_build_parser().parse_args(["--certfile", "c.pem", "--keyfile", "k.pem"]))
        assert settings.tls_enabled is True

    def test_half_tls_flags_rejected(self):
        with pytest.raises(ValidationError):
            _build_settings(_build_parser().parse_args(["--certfile", "c.pem"]))
