"""
jobs/models.py -- Domain dataclasses for access-linking jobs.

A Job tracks one attempt to link a provider's access to a user. It is created
by an access-add request, advanced by answer submissions, and ends in
JobStage.FINISHED either immediately (unknown provider) or once every
challenge in its catalog snapshot has been answered correctly.

JobStatus and friends are the read-only projection returned to clients; they
never alias the stored Job.

Layer rule: no imports from api/ or auth/.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from core.models import JOB_URI_PREFIX, Access, ChallengeAnswer


class JobStage(str, Enum):
    """Stages this engine actually produces.

    The upstream API declares a richer vocabulary (import, cancelled, ...)
    for jobs that fetch transactions after authenticating. This server only
    models authentication, so a job is either still collecting answers or done.
    """

    AUTHENTICATING = "authenticating"
    FINISHED = "finished"


@dataclass
class CatalogEntry:
    """Access template plus the challenge answers required to unlock it.

    challenge_map maps challenge id -> the single accepted value, e.g.
    {"login": "u1", "pin": "1234"}. An empty map means the provider
    authenticates without any answers.
    """

    access: Access
    challenge_map: dict[str, str] = field(default_factory=dict)


@dataclass
class Job:
    id: str
    user_id: str
    provider_id: str
    stage: JobStage = JobStage.AUTHENTICATING
    error: Optional[str] = None
    supplied_answers: list[ChallengeAnswer] = field(default_factory=list)
    # None only for jobs against an unknown provider.
    access_details: Optional[CatalogEntry] = None
    succeeded: bool = False

    @property
    def uri(self) -> str:
        return f"{JOB_URI_PREFIX}{self.id}"

    @property
    def finished(self) -> bool:
        return self.stage is JobStage.FINISHED

    def snapshot(self) -> "Job":
        return copy.deepcopy(self)


# ---------------------------------------------------------------------------
# Status projection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class JobAccount:
    id: str
    name: str
    number: str
    iban: str
    supported: bool


@dataclass(frozen=True)
class JobAccess:
    id: str
    provider_id: str
    name: str
    accounts: tuple[JobAccount, ...] = ()


@dataclass(frozen=True)
class JobStatus:
    """What a client sees when it polls a job.

    errors is empty unless the job failed, in which case it holds exactly one
    error code. access is set only for a job that authenticated successfully.
    """

    uri: str
    finished: bool
    stage: JobStage
    errors: tuple[str, ...] = ()
    access: Optional[JobAccess] = None
