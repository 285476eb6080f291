"""Abstract port for the durable local snapshot of the business data set."""

from abc import ABC, abstractmethod

from atelier.domain.entities import AppData


class SnapshotStore(ABC):
    """Port for local persistence — implemented in the infrastructure layer.

    Both methods are synchronous. ``load`` never raises: a missing or
    unreadable snapshot yields the seed value.
    """

    @abstractmethod
    def load(self) -> AppData:
        """Return the persisted aggregate, or the seed value."""
        ...

    @abstractmethod
    def save(self, data: AppData) -> None:
        """Persist the whole aggregate atomically."""
        ...
