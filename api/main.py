"""
api/main.py -- FastAPI application for the banking test server.

Exposes a TestServer over HTTP at the /v1 paths the client library calls.
The app is built by create_app() so a test can stand up any number of
isolated servers, each with its own in-memory state:

    app = create_app(new_with_defaults())
    with TestClient(app) as client: ...

Run with:  python main.py
           uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. log_requests -- method, path, status and latency for every request;
     request and response bodies too when TESTSERVER_LOG_BODIES is set.

Lifespan builds the TestServer on startup when none was passed in, and logs
the table sizes on shutdown. There is nothing to close: all state is memory.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorItem, ErrorResponse, HealthResponse
from api.routes.v1.accesses import router as accesses_router
from api.routes.v1.jobs import router as jobs_router
from api.routes.v1.users import router as users_router
from core.config import Settings, get_settings
from core.errors import ErrorCode, MalformedRequest, TestServerError
from server import TestServer, new_with_defaults

VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("testserver.api")


def _error_response(status_code: int, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(errors=[ErrorItem(code=code)]).model_dump(),
    )


# ---------------------------------------------------------------------------
# Lifespan -- modern startup / shutdown pattern (replaces @app.on_event)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the TestServer unless create_app() was handed one.

    With seed_defaults (the default) the server starts with the default
    developer, application, user and provider loaded, which is what the
    client library's own test suite expects.
    """
    settings: Settings = app.state.settings
    if getattr(app.state, "server", None) is None:
        app.state.server = new_with_defaults() if settings.seed_defaults else TestServer()
    logger.info("Test server starting up (%s)", app.state.server.store.counts())

    yield

    logger.info("Test server shutdown complete (%s)", app.state.server.store.counts())


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(server: Optional[TestServer] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Assemble the FastAPI app around server (or a fresh one built at startup)."""
    settings = settings or get_settings()
    # basicConfig above owns the handler and format; the level follows whichever
    # Settings this app was built with (CLI flags included).
    logging.getLogger("testserver").setLevel(settings.log_level)
    app = FastAPI(
        title="Banking Test Server",
        description="Deterministic in-memory stand-in for the banking aggregation API.",
        version=VERSION,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.server = server

    # -----------------------------------------------------------------------
    # Request logging middleware
    #
    # Pattern: Interceptor. Every request passes through this coroutine before
    # reaching any route handler. Bodies are buffered only when log_bodies is
    # on, so the default path never touches the stream.
    # -----------------------------------------------------------------------

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        if settings.log_bodies:
            body = await request.body()
            logger.debug("%s read: %s", request.url.path, body.decode("utf-8", "replace"))
        response = await call_next(request)
        if settings.log_bodies:
            chunks = [chunk async for chunk in response.body_iterator]
            payload = b"".join(chunks)
            logger.debug("wrote: %s", payload.decode("utf-8", "replace"))
            response = Response(
                content=payload,
                status_code=response.status_code,
                headers=dict(response.headers),
                media_type=response.media_type,
            )
        ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms %s",
            request.method,
            request.url.path,
            response.status_code,
            ms,
            request.client.host if request.client else "unknown",
        )
        return response

    # -----------------------------------------------------------------------
    # Router registration
    # -----------------------------------------------------------------------

    app.include_router(users_router, prefix="/v1", tags=["Users"])
    app.include_router(accesses_router, prefix="/v1", tags=["Accesses"])
    app.include_router(jobs_router, prefix="/v1", tags=["Jobs"])

    # -----------------------------------------------------------------------
    # Exception handlers
    #
    # All handlers return the same {"errors": [{"code": ...}]} envelope the
    # client library parses, so clients never need to inspect the status
    # code to choose a schema.
    # -----------------------------------------------------------------------

    @app.exception_handler(TestServerError)
    async def test_server_error_handler(request: Request, exc: TestServerError) -> JSONResponse:
        logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, exc.code.value, exc.message)
        return _error_response(exc.status_code, exc.code.value)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed or mistyped request bodies are reported as 400 general."""
        err = MalformedRequest(str(exc.errors()))
        logger.info("%s %s malformed body: %s", request.method, request.url.path, err.message)
        return _error_response(err.status_code, err.code.value)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Framework-level errors (unknown path, wrong method) in the same envelope."""
        code = ErrorCode.RESOURCE_NOT_FOUND if exc.status_code == 404 else ErrorCode.GENERAL
        return _error_response(exc.status_code, code.value)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for bugs in the server itself.

        The raw exception goes to the log only; the client sees server_side.
        """
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error_response(500, ErrorCode.SERVER_SIDE.value)

    # -----------------------------------------------------------------------
    # Health endpoint
    # -----------------------------------------------------------------------

    @app.get("/v1/health", tags=["Health"])
    async def health(request: Request) -> HealthResponse:
        """Return liveness, version and current table sizes."""
        return HealthResponse(version=VERSION, tables=request.app.state.server.store.counts())

    return app
