"""
auth/models.py -- Domain dataclasses for identity entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in core/models.py and jobs/models.py -- dataclasses own domain shape; stores
and routes do the work.

Layer rule: no imports from api/ or jobs/.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.models import Access


@dataclass
class Developer:
    """Owner of one or more applications. Identity only; created at setup."""

    id: str


@dataclass
class Application:
    """A client of the simulated backend.

    Every user and every authorization check is scoped to exactly one
    application. Created at setup and never mutated.
    """

    id: str
    developer_id: str


@dataclass
class User:
    """An end-user of one application.

    password is stored in plain text -- this is a test double and nothing
    here should be mistaken for a real credential store.

    accesses starts empty and only grows: JobEngine appends the provider's
    access template when a job authenticates successfully.
    """

    id: str
    username: str
    password: str
    application_id: str
    accesses: list[Access] = field(default_factory=list)


@dataclass(frozen=True)
class UserToken:
    """Result of user creation and login: the user's id and a fresh session token."""

    id: str
    token: str
