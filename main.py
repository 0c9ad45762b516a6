#!/usr/bin/env python3
"""
Banking test server -- a deterministic stand-in for the aggregation API.

Starts the HTTP server with the default fixture loaded so a client library
can be pointed at it without any real provider.

Usage:
  python main.py
  python main.py --port 9000
  python main.py --no-defaults
  python main.py --certfile cert.pem --keyfile key.pem
  python main.py --log-level debug --log-bodies

Environment variables (see core/config.py):
  TESTSERVER_HOST, TESTSERVER_PORT, TESTSERVER_SSL_CERTFILE, TESTSERVER_SSL_KEYFILE,
  TESTSERVER_SEED_DEFAULTS, TESTSERVER_LOG_LEVEL, TESTSERVER_LOG_BODIES, TESTSERVER_DEBUG
Command-line flags take precedence over the environment.
"""

import argparse

import uvicorn

from api.main import create_app
from core.config import Settings, get_settings
from server import DEFAULT_APPLICATION_ID, DEFAULT_PASSWORD, DEFAULT_PROVIDER_ID, DEFAULT_USERNAME


def _build_settings(args: argparse.Namespace) -> Settings:
    """Overlay command-line flags on the environment-derived settings."""
    overrides: dict = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if args.no_defaults:
        overrides["seed_defaults"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_bodies:
        overrides["log_bodies"] = True
    if args.certfile:
        overrides["ssl_certfile"] = args.certfile
    if args.keyfile:
        overrides["ssl_keyfile"] = args.keyfile
    base = get_settings().model_dump()
    base.update(overrides)
    return Settings(**base)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the in-memory banking test server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", help="Interface to bind (default 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Port to listen on (default 8443)")
    parser.add_argument(
        "--no-defaults",
        action="store_true",
        help="Start empty instead of loading the default application, user and provider",
    )
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug"],
        help="Logging verbosity",
    )
    parser.add_argument("--log-bodies", action="store_true", help="Log request and response bodies at DEBUG")
    parser.add_argument("--certfile", help="TLS certificate (PEM); requires --keyfile")
    parser.add_argument("--keyfile", help="TLS private key (PEM); requires --certfile")
    return parser


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        settings = _build_settings(args)
    except ValueError as e:
        parser.error(str(e))

    scheme = "https" if settings.tls_enabled else "http"
    print("\nBanking Test Server")
    print("─" * 40)
    print(f"Listening on {scheme}://{settings.host}:{settings.port}/v1")
    if settings.seed_defaults:
        print(f"  application id : {DEFAULT_APPLICATION_ID}")
        print(f"  user           : {DEFAULT_USERNAME} / {DEFAULT_PASSWORD}")
        print(f"  provider       : {DEFAULT_PROVIDER_ID}\n")

    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        ssl_certfile=settings.ssl_certfile,
        ssl_keyfile=settings.ssl_keyfile,
    )


if __name__ == "__main__":
    main()
