"""
auth/tokens.py -- Session tokens: issue on login, resolve per request, drop on logout.

Token design:
  Tokens are opaque strings drawn from the store's shared IdSequence and
  rendered as 8-digit hex. They are unique for the lifetime of one server
  instance, deterministic across runs, and never expire. A user may hold any
  number of concurrent tokens -- each login issues a new one.

  This is a test double. Tokens are guessable and passwords are compared in
  plain text on purpose; do not reuse this module for anything real.

Login failures:
  Unknown username, wrong password, and a user that belongs to a different
  application all raise the same AuthenticationFailed, so a client cannot tell
  which check failed.

Layer rule: no imports from api/ or jobs/.
"""

from __future__ import annotations

import logging

from auth.models import User
from auth.store import IdentityStore
from core.errors import AuthenticationFailed
from core.store import Store

logger = logging.getLogger("testserver.auth")


class SessionManager:
    def __init__(self, store: Store, identities: IdentityStore) -> None:
        self._store = store
        self._identities = identities

    def issue(self, user_id: str) -> str:
        """Create a new session token for an existing user."""
        token = self._store.ids.next_id()
        with self._store.lock:
            self._store.tokens[token] = user_id
        return token

    def login(self, application_id: str, username: str, password: str) -> tuple[User, str]:
        """Check credentials within one application and issue a token.

        Returns (user, token). Raises AuthenticationFailed on any mismatch.
        """
        user = self._identities.find_by_username(username)
        if user is None or user.password != password or user.application_id != application_id:
            logger.info("Login rejected for %r in application %s", username, application_id)
            raise AuthenticationFailed("bad credentials")
        token = self.issue(user.id)
        logger.info("User %s logged in", user.id)
        return user, token

    def logout(self, token: str) -> None:
        """Forget a token. Unknown tokens are ignored."""
        with self._store.lock:
            user_id = self._store.tokens.pop(token, None)
        if user_id is not None:
            logger.info("User %s logged out", user_id)

    def resolve(self, token: str) -> str:
        """Return the user id behind a token. Raises AuthenticationFailed if unknown."""
        with self._store.lock:
            user_id = self._store.tokens.get(token)
        if user_id is None:
            raise AuthenticationFailed("unknown session token")
        return user_id
