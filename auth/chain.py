"""
auth/chain.py -- Three-tier request authorization: application, session, job.

Every non-setup operation passes through the chain before doing any work:

  1. Application -- the X-Application-Id value must name a registered
     application, else AppIdInvalid.
  2. Session -- the X-Token value must resolve to a user whose application is
     the one from tier 1, else AuthenticationFailed. A token that is valid for
     another application is treated exactly like an unknown token.
  3. Job (job operations only) -- the job must exist (ResourceNotFound) and
     belong to the user from tier 2 (AuthenticationFailed). Existence is
     checked before ownership.

Each tier short-circuits: a failure never evaluates the later tiers.

The chain is transport-agnostic; auth/dependencies.py adapts it to FastAPI.

Layer rule: may import from jobs.models for the Job type but never from
jobs.engine or api/.
"""

from __future__ import annotations

from typing import Optional

from auth.models import Application, User
from auth.store import IdentityStore
from auth.tokens import SessionManager
from core.errors import AppIdInvalid, AuthenticationFailed, ResourceNotFound
from core.store import Store
from jobs.models import Job


class AuthorizationChain:
    def __init__(self, store: Store, identities: IdentityStore, sessions: SessionManager) -> None:
        self._store = store
        self._identities = identities
        self._sessions = sessions

    def require_app(self, application_id: Optional[str]) -> Application:
        if not application_id:
            raise AppIdInvalid("missing application id")
        try:
            return self._identities.get_application(application_id)
        except ResourceNotFound:
            raise AppIdInvalid(f"unknown application {application_id!r}") from None

    def require_user(self, application_id: Optional[str], token: Optional[str]) -> User:
        """Resolve application and session. Returns the acting user."""
        app = self.require_app(application_id)
        if not token:
            raise AuthenticationFailed("missing session token")
        user_id = self._sessions.resolve(token)
        try:
            user = self._identities.get_user(user_id)
        except ResourceNotFound:
            raise AuthenticationFailed("token references a missing user") from None
        if user.application_id != app.id:
            raise AuthenticationFailed("token issued for another application")
        return user

    def require_job(self, application_id: Optional[str], token: Optional[str], job_id: str) -> tuple[User, Job]:
        """Resolve all three tiers. Returns (user, job snapshot)."""
        user = self.require_user(application_id, token)
        with self._store.lock:
            job = self._store.jobs.get(job_id)
            if job is None:
                raise ResourceNotFound(f"job {job_id!r} not found")
            if job.user_id != user.id:
                raise AuthenticationFailed("job belongs to another user")
            return user, job.snapshot()
