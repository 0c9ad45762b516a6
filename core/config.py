"""
core/config.py -- Centralized server configuration via pydantic-settings.

All environment variable reads happen here. No module should call os.getenv()
or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      with the TESTSERVER_ prefix (e.g. port -> TESTSERVER_PORT).

  @model_validator(mode="after"): cross-field check that TLS is configured
      with both a certificate and a key, or with neither.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or jobs/.
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("testserver.config")

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Server settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="TESTSERVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"
    # Log every request and response body at DEBUG. Noisy; off by default.
    log_bodies: bool = False

    # ------------------------------------------------------------------
    # Listener
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 8443
    ssl_certfile: Optional[str] = None
    ssl_keyfile: Optional[str] = None

    # ------------------------------------------------------------------
    # Fixture
    # ------------------------------------------------------------------

    # Load the default developer/application/user/provider on startup.
    seed_defaults: bool = True

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = str(value).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @model_validator(mode="after")
    def validate_tls(self) -> "Settings":
        """Refuse a half-configured TLS listener.

        uvicorn silently serves plain HTTP when only one of the two files is
        given, which makes a TLS client fail with a confusing handshake error.
        """
        if bool(self.ssl_certfile) != bool(self.ssl_keyfile):
            raise ValueError("ssl_certfile and ssl_keyfile must be set together.")
        if self.debug and self.log_level != "DEBUG":
            logger.info("DEBUG enabled, raising log level from %s to DEBUG", self.log_level)
            self.log_level = "DEBUG"
        return self

    @property
    def tls_enabled(self) -> bool:
        return bool(self.ssl_certfile and self.ssl_keyfile)


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
