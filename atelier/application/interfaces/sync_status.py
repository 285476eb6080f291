"""Abstract port for observing synchronisation outcomes."""

from abc import ABC, abstractmethod


class SyncStatusReporter(ABC):
    """Receives the outcome of every remote fetch and push.

    Sync failures never reach the caller; this is where they become visible.
    """

    @abstractmethod
    def record_success(self, operation: str, collection: str, count: int = 0) -> None:
        ...

    @abstractmethod
    def record_failure(self, operation: str, collection: str, error: BaseException) -> None:
        ...
