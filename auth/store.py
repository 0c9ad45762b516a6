"""
auth/store.py -- Repository for developers, applications and users.

Pattern: Repository over the shared in-memory Store (core/store.py).
IdentityStore is the only code that touches the developers, applications and
users tables. Reads return deep copies so callers can never mutate a stored
record behind the lock's back.

Username uniqueness:
  Usernames are unique across the WHOLE store, not per application. This
  matches the upstream service as observed, though it is probably a latent
  defect: two client applications cannot register the same username. The
  check and the insert run under one lock acquisition, so two concurrent
  creates with the same username cannot both succeed.

Layer rule: no imports from api/ or jobs/.
"""

from __future__ import annotations

import copy
import logging

from auth.models import Application, Developer, User
from core.errors import DuplicateUsername, ResourceNotFound
from core.models import Access
from core.store import Store

logger = logging.getLogger("testserver.auth")


class IdentityStore:
    """Repository for Developer, Application and User entities.

    Usage:
        identities = IdentityStore(Store())
        identities.create_developer("dev1")
        identities.create_application("app1", "dev1")
        user = identities.create_user("app1", "alice", "secret")
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Setup-time records
    # ------------------------------------------------------------------

    def create_developer(self, developer_id: str) -> Developer:
        developer = Developer(id=developer_id)
        with self._store.lock:
            self._store.developers[developer.id] = developer
        return copy.deepcopy(developer)

    def create_application(self, application_id: str, developer_id: str) -> Application:
        """Register an application. The developer is created implicitly if unknown."""
        app = Application(id=application_id, developer_id=developer_id)
        with self._store.lock:
            self._store.developers.setdefault(developer_id, Developer(id=developer_id))
            self._store.applications[app.id] = app
        return copy.deepcopy(app)

    def get_application(self, application_id: str) -> Application:
        """Look up an application by id. Raises ResourceNotFound if missing."""
        with self._store.lock:
            app = self._store.applications.get(application_id)
            if app is None:
                raise ResourceNotFound(f"application {application_id!r} not found")
            return copy.deepcopy(app)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(
        self,
        application_id: str,
        username: str,
        password: str,
        accesses: list[Access] | None = None,
    ) -> User:
        """Insert a new user and return it with its generated id.

        Raises DuplicateUsername if any user in any application already has
        this username. accesses pre-links accounts; used only by fixtures.
        """
        with self._store.lock:
            for existing in self._store.users.values():
                if existing.username == username:
                    raise DuplicateUsername(f"username {username!r} already taken")
            user = User(
                id=self._store.ids.next_id(),
                username=username,
                password=password,
                application_id=application_id,
                accesses=copy.deepcopy(accesses) if accesses else [],
            )
            self._store.users[user.id] = user
        logger.info("Created user %s (%s) in application %s", user.id, username, application_id)
        return copy.deepcopy(user)

    def get_user(self, user_id: str) -> User:
        """Look up a user by id. Raises ResourceNotFound if missing."""
        with self._store.lock:
            user = self._store.users.get(user_id)
            if user is None:
                raise ResourceNotFound(f"user {user_id!r} not found")
            return copy.deepcopy(user)

    def find_by_username(self, username: str) -> User | None:
        """Look up a user by exact username (case-sensitive). Returns None if not found."""
        with self._store.lock:
            for user in self._store.users.values():
                if user.username == username:
                    return copy.deepcopy(user)
        return None

    def append_access(self, user_id: str, access: Access) -> None:
        """Link an access to a user. Called by JobEngine on successful authentication."""
        with self._store.lock:
            user = self._store.users.get(user_id)
            if user is None:
                raise ResourceNotFound(f"user {user_id!r} not found")
            user.accesses.append(copy.deepcopy(access))
        logger.info("Linked access %s (%s) to user %s", access.id, access.provider_id, user_id)
