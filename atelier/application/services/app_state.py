"""State container — holds the current AppData and persists every change."""

import logging
from collections.abc import Callable

from atelier.application.interfaces import SnapshotStore
from atelier.domain.entities import AppData

logger = logging.getLogger(__name__)

Transform = Callable[[AppData], AppData]


class AppDataStore:
    """Owns the single in-memory AppData value for a session.

    Writes are whole-aggregate replacements: ``apply`` runs a pure transform
    over the current value, saves the result through the snapshot store and
    adopts it. Callers issue one transform at a time.
    """

    def __init__(self, snapshot_store: SnapshotStore):
        self._store = snapshot_store
        self._current: AppData | None = None

    @property
    def current(self) -> AppData:
        if self._current is None:
            self._current = self._store.load()
        return self._current

    def load(self) -> AppData:
        """(Re)read the persisted snapshot and adopt it."""
        self._current = self._store.load()
        return self._current

    def save(self, data: AppData) -> AppData:
        self._store.save(data)
        self._current = data
        return data

    def apply(self, transform: Transform) -> AppData:
        return self.save(transform(self.current))

    def reset(self, data: AppData) -> AppData:
        """Adopt a value that has already been persisted elsewhere."""
        self._current = data
        return data
