"""Pydantic DTOs for sync status and retry results."""

from atelier.application.schemas.snapshot import CamelModel
from atelier.application.services.sync_status_tracker import SyncStatus


class SyncFailureResponse(CamelModel):
    operation: str
    collection: str
    error: str
    at: int


class SyncStatusResponse(CamelModel):
    backend: str
    successes: dict[str, int]
    failures: dict[str, int]
    last_success_at: int | None
    last_failure: SyncFailureResponse | None
    pending_retries: int

    @classmethod
    def from_status(cls, backend: str, status: SyncStatus) -> "SyncStatusResponse":
        failure = status.last_failure
        return cls(
            backend=backend,
            successes=status.successes,
            failures=status.failures,
            last_success_at=status.last_success_at,
            last_failure=(
                SyncFailureResponse(
                    operation=failure.operation,
                    collection=failure.collection,
                    error=failure.error,
                    at=failure.at,
                )
                if failure
                else None
            ),
            pending_retries=status.pending_retries,
        )


class RetryResponse(CamelModel):
    succeeded: int
    pending: int
