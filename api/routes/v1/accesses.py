"""
api/routes/v1/accesses.py -- Access linking and account listing.

Routes:
  POST /v1/accesses              -- start a job linking a provider; 202 + job URI
  GET  /v1/accesses              -- accesses linked to the session's user
  GET  /v1/accesses/{access_id}  -- one linked access
  GET  /v1/accounts              -- every account across the user's accesses

All routes require X-Application-Id and X-Token. Linking is asynchronous from
the client's point of view: POST only returns the job URI, and the client
polls /v1/jobs/{id} for the outcome -- even for an unknown provider.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.models import AccessCreate, AccessModel, AccountModel, AccountPage, JobURIResponse
from auth.dependencies import Credentials, get_credentials, get_server
from server import TestServer

router = APIRouter()


@router.post("/accesses", response_model=JobURIResponse, status_code=202)
def create_access(
    body: AccessCreate,
    creds: Credentials = Depends(get_credentials),
    server: TestServer = Depends(get_server),
) -> JobURIResponse:
    uri = server.create_job(creds.application_id, creds.token, body.provider_id or "", body.answers())
    return JobURIResponse(uri=uri)


@router.get("/accesses", response_model=list[AccessModel])
def list_accesses(
    creds: Credentials = Depends(get_credentials),
    server: TestServer = Depends(get_server),
) -> list[AccessModel]:
    return [AccessModel.from_domain(a) for a in server.list_accesses(creds.application_id, creds.token)]


@router.get("/accesses/{access_id}", response_model=AccessModel)
def get_access(
    access_id: str,
    creds: Credentials = Depends(get_credentials),
    server: TestServer = Depends(get_server),
) -> AccessModel:
    return AccessModel.from_domain(server.get_access(creds.application_id, creds.token, access_id))


@router.get("/accounts", response_model=AccountPage)
def list_accounts(
    creds: Credentials = Depends(get_credentials),
    server: TestServer = Depends(get_server),
) -> AccountPage:
    accounts = server.list_accounts(creds.application_id, creds.token)
    return AccountPage(accounts=[AccountModel.from_domain(a) for a in accounts])
