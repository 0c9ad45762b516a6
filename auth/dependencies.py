"""
auth/dependencies.py -- FastAPI Depends() helpers for request credentials.

Two headers identify the caller:
  X-Application-Id -- the calling application (every route except setup-free stubs).
  X-Token          -- the session token issued by create-user or login.

These helpers only extract values; the authorization decision belongs to
AuthorizationChain (auth/chain.py), which every TestServer operation runs
first. Keeping the decision out of the transport means the core can be tested
without FastAPI and the HTTP layer cannot drift from it.

Layer rule: auth/dependencies.py may import from fastapi (for Depends/Header/
Request) and from server (for the TestServer type) because this module is
part of the FastAPI dependency injection system. Nothing else in auth/ may.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Header, Request

from server import TestServer


@dataclass(frozen=True)
class Credentials:
    application_id: Optional[str]
    token: Optional[str]


def get_credentials(
    x_application_id: Optional[str] = Header(default=None),
    x_token: Optional[str] = Header(default=None),
) -> Credentials:
    """Read X-Application-Id and X-Token. Missing headers become None.

    Use as a FastAPI dependency:
        @router.get("/accesses")
        def route(creds: Credentials = Depends(get_credentials)): ...
    """
    return Credentials(application_id=x_application_id, token=x_token)


def get_server(request: Request) -> TestServer:
    """Return the TestServer wired into app.state by the lifespan."""
    return request.app.state.server
