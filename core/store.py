"""
core/store.py -- Volatile in-memory tables shared by every component.

Pattern: one Store object owns all tables and a single coarse lock. It is
created once per server instance and injected into IdentityStore,
SessionManager, AccessCatalog and JobEngine, which are the only code that
reads or writes the tables. Nothing is persisted; state dies with the process.

Locking:
  Store.lock is a re-entrant lock. Components hold it for one table access or
  one read-modify-write (e.g. "check username then insert", "load job, apply
  answers, save job") and never across I/O -- the core performs none.
  RLock rather than Lock so JobEngine can call IdentityStore.append_access()
  while it already holds the lock for the job update.

Id generation:
  IdSequence is a separate component with its own lock. Every generated id
  (users, jobs, session tokens) comes from the same counter, rendered as an
  8-digit lowercase hex string, so ids are unique across entity kinds for the
  lifetime of one instance.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or jobs/. Table values are typed loosely here for that reason.
"""

from __future__ import annotations

import threading
from typing import Any


class IdSequence:
    """Monotonic counter rendered as fixed-width hex ("00000001", "00000002", ...)."""

    def __init__(self, start: int = 0) -> None:
        self._value = start
        self._lock = threading.Lock()

    def next_int(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def next_id(self) -> str:
        return f"{self.next_int():08x}"


class Store:
    """Container for every table, keyed by string id.

    Tables:
      developers    developer id -> Developer
      applications  application id -> Application
      users         user id -> User
      tokens        session token -> user id
      catalog       provider id -> CatalogEntry
      jobs          job id -> Job

    Usage:
        store = Store()
        with store.lock:
            store.users[user.id] = user
    """

    def __init__(self, ids: IdSequence | None = None) -> None:
        self.lock = threading.RLock()
        self.ids = ids if ids is not None else IdSequence()
        self.developers: dict[str, Any] = {}
        self.applications: dict[str, Any] = {}
        self.users: dict[str, Any] = {}
        self.tokens: dict[str, str] = {}
        self.catalog: dict[str, Any] = {}
        self.jobs: dict[str, Any] = {}

    def counts(self) -> dict[str, int]:
        """Row count per table. Used by the health endpoint and in logs."""
        with self.lock:
            return {
                "developers": len(self.developers),
                "applications": len(self.applications),
                "users": len(self.users),
                "tokens": len(self.tokens),
                "providers": len(self.catalog),
                "jobs": len(self.jobs),
            }
