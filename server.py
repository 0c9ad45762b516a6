"""
server.py -- TestServer: the operation surface of the simulated backend.

Wires one Store into IdentityStore, SessionManager, AccessCatalog,
AuthorizationChain and JobEngine, and exposes the operations the HTTP layer
calls. Every operation except the setup helpers runs the authorization chain
first; results are plain dataclasses, failures are TestServerError subclasses.

Usage:
    server = new_with_defaults()
    ut = server.login(DEFAULT_APPLICATION_ID, DEFAULT_USERNAME, DEFAULT_PASSWORD)
    uri = server.create_job(DEFAULT_APPLICATION_ID, ut.token, DEFAULT_PROVIDER_ID, [])

Each TestServer is independent: tests that need isolation build their own.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Optional

from auth.chain import AuthorizationChain
from auth.models import User, UserToken
from auth.store import IdentityStore
from auth.tokens import SessionManager
from core.errors import NotImplementedByTestServer, ResourceNotFound
from core.models import Access, Account, ChallengeAnswer
from core.store import Store
from jobs.catalog import AccessCatalog
from jobs.engine import JobEngine
from jobs.models import JobStatus

logger = logging.getLogger("testserver.server")

# ---------------------------------------------------------------------------
# Default fixture
# ---------------------------------------------------------------------------

DEFAULT_DEVELOPER_ID = "testdeveloper"
DEFAULT_APPLICATION_ID = "testapplication"
DEFAULT_USERNAME = "testuser"
DEFAULT_PASSWORD = "testpassword"
DEFAULT_PROVIDER_ID = "testprovider"
DEFAULT_ACCESS_ID = "testaccess"
DEFAULT_ACCESS_NAME = "default access"
DEFAULT_ACCESS_LOGIN = "u1"
DEFAULT_ACCESS_PIN = "1234"


def default_access() -> Access:
    return Access(
        id=DEFAULT_ACCESS_ID,
        provider_id=DEFAULT_PROVIDER_ID,
        name=DEFAULT_ACCESS_NAME,
        accounts=[
            Account(
                id="testaccount1",
                name="Girokonto",
                number="1000000001",
                iban="DE89370400440532013000",
                supported=True,
            ),
            Account(
                id="testaccount2",
                name="Tagesgeld",
                number="1000000002",
                iban="DE89370400440532013001",
                supported=True,
            ),
        ],
    )


class TestServer:
    __test__ = False  # not a pytest test class

    def __init__(self, store: Optional[Store] = None) -> None:
        self.store = store if store is not None else Store()
        self.identities = IdentityStore(self.store)
        self.sessions = SessionManager(self.store, self.identities)
        self.catalog = AccessCatalog(self.store)
        self.jobs = JobEngine(self.store, self.catalog, self.identities)
        self.chain = AuthorizationChain(self.store, self.identities, self.sessions)

    # ------------------------------------------------------------------
    # Setup helpers -- no authorization
    # ------------------------------------------------------------------

    def add_developer(self, developer_id: str) -> None:
        self.identities.create_developer(developer_id)

    def add_application(self, application_id: str, developer_id: str) -> None:
        self.identities.create_application(application_id, developer_id)

    def add_user(
        self,
        application_id: str,
        username: str,
        password: str,
        accesses: Optional[list[Access]] = None,
    ) -> User:
        """Insert a user directly, optionally with accesses already linked."""
        return self.identities.create_user(application_id, username, password, accesses=accesses)

    def register_access_provider(self, provider_id: str, access: Access, challenge_map: Mapping[str, str]) -> None:
        self.catalog.register(provider_id, access, challenge_map)

    def add_access(self, access: Access, challenge_map: Mapping[str, str]) -> None:
        """Register access as the template for its own provider id."""
        self.register_access_provider(access.provider_id, access, challenge_map)

    # ------------------------------------------------------------------
    # Users and sessions
    # ------------------------------------------------------------------

    def create_user(self, application_id: Optional[str], username: str, password: str) -> UserToken:
        app = self.chain.require_app(application_id)
        user = self.identities.create_user(app.id, username, password)
        return UserToken(id=user.id, token=self.sessions.issue(user.id))

    def login(self, application_id: Optional[str], username: str, password: str) -> UserToken:
        app = self.chain.require_app(application_id)
        user, token = self.sessions.login(app.id, username, password)
        return UserToken(id=user.id, token=token)

    def logout(self, application_id: Optional[str], token: Optional[str]) -> None:
        self.chain.require_user(application_id, token)
        self.sessions.logout(token)

    def delete_user(self) -> None:
        raise NotImplementedByTestServer("user deletion")

    def reset_password(self) -> None:
        raise NotImplementedByTestServer("password reset")

    # ------------------------------------------------------------------
    # Accesses and accounts
    # ------------------------------------------------------------------

    def list_accesses(self, application_id: Optional[str], token: Optional[str]) -> list[Access]:
        return self.chain.require_user(application_id, token).accesses

    def get_access(self, application_id: Optional[str], token: Optional[str], access_id: str) -> Access:
        user = self.chain.require_user(application_id, token)
        for access in user.accesses:
            if access.id == access_id:
                return access
        raise ResourceNotFound(f"access {access_id!r} not linked to user {user.id}")

    def list_accounts(self, application_id: Optional[str], token: Optional[str]) -> list[Account]:
        user = self.chain.require_user(application_id, token)
        return [copy.deepcopy(acc) for access in user.accesses for acc in access.accounts]

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def create_job(
        self,
        application_id: Optional[str],
        token: Optional[str],
        provider_id: str,
        answers: Iterable[ChallengeAnswer] = (),
    ) -> str:
        """Start linking provider_id for the session's user. Returns the job URI."""
        user = self.chain.require_user(application_id, token)
        return self.jobs.create(user.id, provider_id, answers).uri

    def get_job_status(self, application_id: Optional[str], token: Optional[str], job_id: str) -> JobStatus:
        _, job = self.chain.require_job(application_id, token, job_id)
        return self.jobs.status(job)

    def submit_job_answers(
        self,
        application_id: Optional[str],
        token: Optional[str],
        job_id: str,
        answers: Iterable[ChallengeAnswer],
    ) -> JobStatus:
        self.chain.require_job(application_id, token, job_id)
        return self.jobs.status(self.jobs.submit(job_id, answers))

    def delete_job(self, application_id: Optional[str], token: Optional[str], job_id: str) -> None:
        self.chain.require_job(application_id, token, job_id)
        raise NotImplementedByTestServer("job deletion")


def new_with_defaults() -> TestServer:
    """Return a TestServer preloaded with the default developer, application,
    user and provider.

    The default provider requires two challenges: "login" answered with
    DEFAULT_ACCESS_LOGIN and "pin" answered with DEFAULT_ACCESS_PIN.
    """
    server = TestServer()
    server.add_developer(DEFAULT_DEVELOPER_ID)
    server.add_application(DEFAULT_APPLICATION_ID, DEFAULT_DEVELOPER_ID)
    server.add_user(DEFAULT_APPLICATION_ID, DEFAULT_USERNAME, DEFAULT_PASSWORD)
    server.add_access(
        default_access(),
        {"login": DEFAULT_ACCESS_LOGIN, "pin": DEFAULT_ACCESS_PIN},
    )
    logger.info("Default fixture loaded: %s", server.store.counts())
    return server
