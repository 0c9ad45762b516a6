"""
jobs/engine.py -- The challenge-driven job state machine.

States:
  (not created) --create, unknown provider-----------------> FINISHED (error)
  (not created) --create------> AUTHENTICATING --advance---> FINISHED (succeeded)
                                   ^     |
                                   +-----+ advance, some challenge unanswered

Rules:
  - Answers are cumulative. Every submitted answer is appended to the job's
    history; nothing is discarded or deduplicated.
  - A challenge is satisfied only by an answer with exactly the same id AND
    value. No case folding, no trimming, no partial credit.
  - When every challenge in the job's catalog snapshot is satisfied the job
    finishes, succeeded is set, and the snapshot access is appended to the
    owning user -- once. A FINISHED job is never re-evaluated, so resubmitting
    answers after completion cannot link the access twice.
  - "Not yet complete" is a normal outcome, not an error.

Atomicity:
  create() and submit() apply answers and persist the job while holding the
  store lock, so concurrent submissions against one job serialize and the
  access append happens at most once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from auth.store import IdentityStore
from core.errors import ResourceNotFound, UnknownProvider
from core.models import ChallengeAnswer
from core.store import Store
from jobs.catalog import AccessCatalog
from jobs.models import Job, JobAccess, JobAccount, JobStage, JobStatus

logger = logging.getLogger("testserver.jobs")


def is_answered(job: Job, challenge_id: str, value: str) -> bool:
    return any(ans.id == challenge_id and ans.value == value for ans in job.supplied_answers)


class JobEngine:
    def __init__(self, store: Store, catalog: AccessCatalog, identities: IdentityStore) -> None:
        self._store = store
        self._catalog = catalog
        self._identities = identities

    def create(self, user_id: str, provider_id: str, answers: Iterable[ChallengeAnswer] = ()) -> Job:
        """Start a job for user_id against provider_id and apply any up-front answers.

        An unknown provider does not raise: the job is stored already FINISHED
        with error "unknown_provider" so the client discovers it by polling,
        as it would against the real service.

        Returns a snapshot of the stored job.
        """
        self._identities.get_user(user_id)
        job = Job(id=self._store.ids.next_id(), user_id=user_id, provider_id=provider_id)

        try:
            job.access_details = self._catalog.lookup(provider_id)
        except UnknownProvider as exc:
            job.stage = JobStage.FINISHED
            job.error = exc.code.value
            with self._store.lock:
                self._store.jobs[job.id] = job
            logger.info("Job %s for user %s: unknown provider %r", job.id, user_id, provider_id)
            return job.snapshot()

        with self._store.lock:
            self.advance(job, answers)
            self._store.jobs[job.id] = job
            logger.info("Job %s for user %s created at stage %s", job.id, user_id, job.stage.value)
            return job.snapshot()

    def advance(self, job: Job, answers: Iterable[ChallengeAnswer]) -> None:
        """Record answers on job and finish it if every challenge is now satisfied.

        Mutates job in place. Callers that pass a stored job must hold the
        store lock.
        """
        job.supplied_answers.extend(answers)

        if job.finished or job.access_details is None:
            return

        for challenge_id, expected in job.access_details.challenge_map.items():
            if not is_answered(job, challenge_id, expected):
                return

        # Link first: if the owner vanished the job must not claim success.
        self._identities.append_access(job.user_id, job.access_details.access)
        job.stage = JobStage.FINISHED
        job.succeeded = True
        logger.info("Job %s finished: access %s linked", job.id, job.access_details.access.id)

    def submit(self, job_id: str, answers: Iterable[ChallengeAnswer]) -> Job:
        """Apply answers to a stored job. Returns a snapshot after the update."""
        with self._store.lock:
            job = self._store.jobs.get(job_id)
            if job is None:
                raise ResourceNotFound(f"job {job_id!r} not found")
            self.advance(job, answers)
            return job.snapshot()

    def get(self, job_id: str) -> Job:
        with self._store.lock:
            job = self._store.jobs.get(job_id)
            if job is None:
                raise ResourceNotFound(f"job {job_id!r} not found")
            return job.snapshot()

    @staticmethod
    def status(job: Job) -> JobStatus:
        """Project a job into what a polling client sees. Never mutates job."""
        access = None
        if job.succeeded and job.access_details is not None:
            template = job.access_details.access
            access = JobAccess(
                id=template.id,
                provider_id=template.provider_id,
                name=template.name,
                accounts=tuple(
                    JobAccount(
                        id=acc.id,
                        name=acc.name,
                        number=acc.number,
                        iban=acc.iban,
                        supported=acc.supported,
                    )
                    for acc in template.accounts
                ),
            )
        return JobStatus(
            uri=job.uri,
            finished=job.finished,
            stage=job.stage,
            errors=(job.error,) if job.error else (),
            access=access,
        )
