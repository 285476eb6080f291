"""Sync status tracker — the default observer of remote fetch/push outcomes.

Keeps per-operation success/failure counters and the most recent error so
swallowed sync failures can be inspected (``GET /sync/status``).
"""

import logging
from collections import Counter
from dataclasses import dataclass, field

from atelier.application.interfaces import SyncStatusReporter
from atelier.domain.coercion import now_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncFailure:
    operation: str
    collection: str
    error: str
    at: int = field(default_factory=now_ms)


@dataclass(frozen=True)
class SyncStatus:
    successes: dict[str, int]
    failures: dict[str, int]
    last_success_at: int | None
    last_failure: SyncFailure | None
    pending_retries: int = 0


class SyncStatusTracker(SyncStatusReporter):
    """Counts and logs sync outcomes.

    Usage:
        tracker = SyncStatusTracker()
        engine = SyncEngine(store, remote, reporter=tracker)
        ...
        tracker.snapshot().failures  # {"push": 2}
    """

    def __init__(self) -> None:
        self._successes: Counter[str] = Counter()
        self._failures: Counter[str] = Counter()
        self._last_success_at: int | None = None
        self._last_failure: SyncFailure | None = None

    def record_success(self, operation: str, collection: str, count: int = 0) -> None:
        self._successes[operation] += 1
        self._last_success_at = now_ms()
        logger.debug("Sync %s [%s] ok rows=%d", operation, collection, count)

    def record_failure(self, operation: str, collection: str, error: BaseException) -> None:
        self._failures[operation] += 1
        message = str(error) or type(error).__name__
        self._last_failure = SyncFailure(operation=operation, collection=collection, error=message)
        logger.warning("Sync %s [%s] failed: %s", operation, collection, message)

    def snapshot(self, pending_retries: int = 0) -> SyncStatus:
        return SyncStatus(
            successes=dict(self._successes),
            failures=dict(self._failures),
            last_success_at=self._last_success_at,
            last_failure=self._last_failure,
            pending_retries=pending_retries,
        )
