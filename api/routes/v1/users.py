"""
api/routes/v1/users.py -- User lifecycle endpoints.

Routes:
  POST   /v1/users                 -- create user in the caller's application; returns id + token
  DELETE /v1/users                 -- not implemented by the test server
  POST   /v1/users/login           -- password login; returns id + token
  POST   /v1/users/logout          -- drop the session token; 204
  POST   /v1/users/reset_password  -- not implemented by the test server

Auth policy:
  create/login require X-Application-Id; logout also requires X-Token.
  The two stubs fail unconditionally before looking at any header.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from api.models import UserCredentials, UserTokenResponse
from auth.dependencies import Credentials, get_credentials, get_server
from server import TestServer

router = APIRouter()


@router.post("/users", response_model=UserTokenResponse, status_code=201)
def create_user(
    body: UserCredentials,
    creds: Credentials = Depends(get_credentials),
    server: TestServer = Depends(get_server),
) -> UserTokenResponse:
    """Create a user and log them in. Duplicate usernames fail with server_side."""
    ut = server.create_user(creds.application_id, body.username, body.password)
    return UserTokenResponse.from_domain(ut)


@router.delete("/users")
def delete_user(server: TestServer = Depends(get_server)) -> None:
    server.delete_user()


@router.post("/users/login", response_model=UserTokenResponse)
def login(
    body: UserCredentials,
    creds: Credentials = Depends(get_credentials),
    server: TestServer = Depends(get_server),
) -> UserTokenResponse:
    ut = server.login(creds.application_id, body.username, body.password)
    return UserTokenResponse.from_domain(ut)


@router.post("/users/logout", status_code=204)
def logout(
    creds: Credentials = Depends(get_credentials),
    server: TestServer = Depends(get_server),
) -> Response:
    server.logout(creds.application_id, creds.token)
    return Response(status_code=204)


@router.post("/users/reset_password")
def reset_password(server: TestServer = Depends(get_server)) -> None:
    server.reset_password()
