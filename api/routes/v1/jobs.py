"""
api/routes/v1/jobs.py -- Job polling and challenge answers.

Routes:
  GET    /v1/jobs/{job_id}  -- current JobStatus
  PUT    /v1/jobs/{job_id}  -- submit more challenge answers; returns the updated JobStatus
  DELETE /v1/jobs/{job_id}  -- not implemented (after the usual authorization)

The job must belong to the session's user: a missing job is 404
resource_not_found, someone else's job is 401 authentication_failed.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.models import JobAnswers, JobStatusResponse
from auth.dependencies import Credentials, get_credentials, get_server
from server import TestServer

router = APIRouter()


@router.get("/jobs/{job_id}", response_model=JobStatusResponse, response_model_exclude_none=True)
def get_job(
    job_id: str,
    creds: Credentials = Depends(get_credentials),
    server: TestServer = Depends(get_server),
) -> JobStatusResponse:
    return JobStatusResponse.from_status(server.get_job_status(creds.application_id, creds.token, job_id))


@router.put("/jobs/{job_id}", response_model=JobStatusResponse, response_model_exclude_none=True)
def answer_job(
    job_id: str,
    body: JobAnswers,
    creds: Credentials = Depends(get_credentials),
    server: TestServer = Depends(get_server),
) -> JobStatusResponse:
    status = server.submit_job_answers(creds.application_id, creds.token, job_id, body.answers())
    return JobStatusResponse.from_status(status)


@router.delete("/jobs/{job_id}")
def delete_job(
    job_id: str,
    creds: Credentials = Depends(get_credentials),
    server: TestServer = Depends(get_server),
) -> None:
    server.delete_job(creds.application_id, creds.token, job_id)
