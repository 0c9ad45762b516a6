"""
API request and response models for the test server REST endpoints.

These Pydantic v2 models define the HTTP transport contract -- the JSON shapes
the client library sends and expects. They are intentionally separate from
the dataclasses in core/, auth/ and jobs/, which own the internal domain
representation. Route handlers map between the two using the from_* factory
methods colocated with each response model.

Separation of concerns: domain dataclasses = server truth; api/ models = wire contract.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import UserToken
from core.models import Access, Account, ChallengeAnswer
from jobs.models import JobAccess, JobAccount, JobStatus

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class UserCredentials(BaseModel):
    """Request body for POST /v1/users and POST /v1/users/login."""

    username: str
    password: str


class ChallengeAnswerModel(BaseModel):
    id: str
    value: str

    def to_domain(self) -> ChallengeAnswer:
        return ChallengeAnswer(id=self.id, value=self.value)


class AccessCreate(BaseModel):
    """Request body for POST /v1/accesses.

    Both fields may be omitted or null: an empty provider id simply produces
    a job that fails with unknown_provider.
    """

    provider_id: Optional[str] = None
    challenge_answers: Optional[list[ChallengeAnswerModel]] = None

    def answers(self) -> list[ChallengeAnswer]:
        return [a.to_domain() for a in self.challenge_answers or []]


class JobAnswers(BaseModel):
    """Request body for PUT /v1/jobs/{job_id}."""

    challenge_answers: Optional[list[ChallengeAnswerModel]] = None

    def answers(self) -> list[ChallengeAnswer]:
        return [a.to_domain() for a in self.challenge_answers or []]


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserTokenResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    token: str

    @classmethod
    def from_domain(cls, ut: UserToken) -> "UserTokenResponse":
        return cls(id=ut.id, token=ut.token)


class AccountModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    number: str
    iban: str
    supported: bool

    @classmethod
    def from_domain(cls, acc: Account) -> "AccountModel":
        return cls(id=acc.id, name=acc.name, number=acc.number, iban=acc.iban, supported=acc.supported)

    @classmethod
    def from_job_account(cls, acc: JobAccount) -> "AccountModel":
        return cls(id=acc.id, name=acc.name, number=acc.number, iban=acc.iban, supported=acc.supported)


class AccessModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    provider_id: str
    name: str
    accounts: list[AccountModel] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, access: Access) -> "AccessModel":
        return cls(
            id=access.id,
            provider_id=access.provider_id,
            name=access.name,
            accounts=[AccountModel.from_domain(a) for a in access.accounts],
        )

    @classmethod
    def from_job_access(cls, access: JobAccess) -> "AccessModel":
        return cls(
            id=access.id,
            provider_id=access.provider_id,
            name=access.name,
            accounts=[AccountModel.from_job_account(a) for a in access.accounts],
        )


class AccountPage(BaseModel):
    """Response body for GET /v1/accounts -- every account across the user's accesses."""

    model_config = ConfigDict(frozen=True)

    accounts: list[AccountModel] = Field(default_factory=list)


class JobURIResponse(BaseModel):
    """Response body for POST /v1/accesses. uri is relative to /v1."""

    model_config = ConfigDict(frozen=True)

    uri: str


class ErrorItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str


class JobStatusResponse(BaseModel):
    """Response body for GET and PUT /v1/jobs/{job_id}.

    access is omitted from the JSON unless the job authenticated successfully.
    """

    model_config = ConfigDict(frozen=True)

    finished: bool
    stage: str
    uri: str
    errors: list[ErrorItem] = Field(default_factory=list)
    access: Optional[AccessModel] = None

    @classmethod
    def from_status(cls, status: JobStatus) -> "JobStatusResponse":
        access = AccessModel.from_job_access(status.access) if status.access is not None else None
        return cls(
            finished=status.finished,
            stage=status.stage.value,
            uri=status.uri,
            errors=[ErrorItem(code=code) for code in status.errors],
            access=access,
        )


class ErrorResponse(BaseModel):
    """Wire envelope for every failure: {"errors": [{"code": "..."}]}."""

    model_config = ConfigDict(frozen=True)

    errors: list[ErrorItem]


class HealthResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    tables: dict[str, int] = Field(default_factory=dict)
