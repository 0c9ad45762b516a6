"""
jobs/catalog.py -- Registered providers and the challenges that unlock them.

Entries are registered at setup time (by fixtures or tests) and are read-only
from the job engine's point of view. Registering a provider id again replaces
the previous entry; jobs created earlier keep the snapshot they took.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping

from core.errors import UnknownProvider
from core.models import Access
from core.store import Store
from jobs.models import CatalogEntry

logger = logging.getLogger("testserver.jobs")


class AccessCatalog:
    def __init__(self, store: Store) -> None:
        self._store = store

    def register(self, provider_id: str, access: Access, challenge_map: Mapping[str, str]) -> None:
        entry = CatalogEntry(access=copy.deepcopy(access), challenge_map=dict(challenge_map))
        with self._store.lock:
            self._store.catalog[provider_id] = entry
        logger.info("Registered provider %s (%d challenge(s))", provider_id, len(entry.challenge_map))

    def lookup(self, provider_id: str) -> CatalogEntry:
        """Return a private copy of the provider's entry. Raises UnknownProvider."""
        with self._store.lock:
            entry = self._store.catalog.get(provider_id)
            if entry is None:
                raise UnknownProvider(f"provider {provider_id!r} is not registered")
            return copy.deepcopy(entry)

    def provider_ids(self) -> list[str]:
        with self._store.lock:
            return sorted(self._store.catalog)
