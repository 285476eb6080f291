"""SyncEngine — time-bounded reconciliation between the local snapshot and a remote mirror.

The local snapshot is authoritative. A remote fetch replaces it only when
every collection arrives without error inside the timeout, and even then
settings stay local. Pushes are best-effort: failures are reported, logged
and parked in a bounded retry queue, never raised.

The retry queue holds (collection, id) keys, not entity copies. A replay
pushes whatever the local snapshot holds for the id at that moment: the
entity if it still exists, a deletion if it does not. A later successful
push for the same id clears its queued key.
"""

import asyncio
from collections import OrderedDict
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from atelier.application.interfaces import RemoteStore, Row, SnapshotStore, SyncStatusReporter
from atelier.application.services.entity_collections import Collection
from atelier.application.services.remote_normalizer import (
    TABLES,
    TableSpec,
    normalize_remote,
    rows_for,
)
from atelier.application.services.sync_status_tracker import SyncStatusTracker
from atelier.domain.entities import AppData
from atelier.infrastructure.logging.sync_logger import SyncLogger, SyncStage

slog = SyncLogger("SyncEngine")

DEFAULT_TIMEOUT_MS = 3000

UPSERT = "upsert"
DELETE = "delete"


@dataclass(frozen=True)
class PendingPush:
    """One batched push to the remote mirror.

    ``payload`` holds entities for an upsert and ids for a delete.
    """

    operation: str
    collection: Collection
    payload: tuple[Any, ...]

    @classmethod
    def upsert(cls, collection: Collection, entities: Iterable[Any]) -> "PendingPush":
        return cls(UPSERT, collection, tuple(entities))

    @classmethod
    def delete(cls, collection: Collection, ids: Iterable[str]) -> "PendingPush":
        return cls(DELETE, collection, tuple(ids))


class SyncEngine:
    """Bridges a :class:`SnapshotStore` and an optional :class:`RemoteStore`.

    With no remote store every operation is a local no-op.
    """

    def __init__(
        self,
        snapshot_store: SnapshotStore,
        remote_store: RemoteStore | None = None,
        *,
        reporter: SyncStatusReporter | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        retry_queue_size: int = 100,
    ):
        self._store = snapshot_store
        self._remote = remote_store
        self._reporter = reporter or SyncStatusTracker()
        self._timeout = max(timeout_ms, 0) / 1000
        self._retry_size = max(retry_queue_size, 0)
        self._pending: OrderedDict[tuple[Collection, str], None] = OrderedDict()

    @property
    def enabled(self) -> bool:
        return self._remote is not None

    @property
    def backend_name(self) -> str:
        return self._remote.backend_name if self._remote is not None else "none"

    @property
    def reporter(self) -> SyncStatusReporter:
        return self._reporter

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    # ── Fetch ────────────────────────────────────────────────────────

    async def fetch_all(self) -> AppData:
        """Return the reconciled data set; never raises for remote problems.

        All six collections are fetched concurrently under one timeout. Any
        failure abandons the merge and the local snapshot is returned as-is.
        Queued pushes are replayed first; while any of them is still
        unsynced the remote view is stale and the merge is skipped.
        """
        local = self._store.load()
        if self._remote is None:
            return local

        if self._pending:
            await self.retry_pending()
            if self._pending:
                slog.step_warning(
                    SyncStage.FALLBACK,
                    f"{len(self._pending)} local change(s) not yet mirrored; keeping local snapshot",
                )
                return self._store.load()

        try:
            with slog.timed_step(
                SyncStage.FETCH, "Fetching remote collections", backend=self._remote.backend_name
            ):
                tables = await asyncio.wait_for(self._fetch_tables(), self._timeout)
        except Exception as exc:
            self._reporter.record_failure("fetch", "all", exc)
            slog.step_warning(SyncStage.FALLBACK, "Remote unavailable; keeping local snapshot")
            return local

        merged = normalize_remote(tables, local.settings)
        self._store.save(merged)
        self._reporter.record_success("fetch", "all", sum(len(rows) for rows in tables.values()))
        slog.step_complete(
            SyncStage.MERGE,
            "Local snapshot replaced by remote data",
            materials=len(merged.materials),
            products=len(merged.products),
            clients=len(merged.clients),
            quotes=len(merged.quotes),
            receipts=len(merged.receipts),
            transactions=len(merged.transactions),
        )
        return merged

    async def _fetch_tables(self) -> dict[str, list[Row]]:
        results = await asyncio.gather(
            *(self._fetch_collection(spec) for spec in TABLES.values())
        )
        tables: dict[str, list[Row]] = {}
        for result in results:
            tables.update(result)
        return tables

    async def _fetch_collection(self, spec: TableSpec) -> dict[str, list[Row]]:
        rows = await asyncio.gather(*(self._remote.fetch_rows(t) for t in spec.tables))
        slog.detail(f"Fetched {spec.collection.value}", rows=sum(len(r) for r in rows))
        return dict(zip(spec.tables, rows))

    # ── Push ─────────────────────────────────────────────────────────

    async def push(self, collection: Collection, entities: Iterable[Any]) -> bool:
        """Upsert *entities* (and their child rows) to the remote mirror.

        Returns False when the push failed and was queued for retry.
        """
        return await self._attempt(PendingPush.upsert(collection, entities))

    async def push_deletions(self, collection: Collection, ids: Iterable[str]) -> bool:
        """Delete remote rows: owned children first, then the parents."""
        return await self._attempt(PendingPush.delete(collection, ids))

    def defer(self, pending: PendingPush) -> None:
        """Queue a push for the next :meth:`retry_pending` without attempting it."""
        if self._remote is not None and pending.payload:
            self._enqueue(pending)

    async def retry_pending(self) -> int:
        """Replay queued ids from the current local snapshot.

        Ids still present locally are upserted, the rest are deleted.
        Failures go back on the queue. Returns the number of ids mirrored.
        """
        if not self._pending:
            return 0
        keys = list(self._pending)
        self._pending.clear()
        slog.step_start(SyncStage.RETRY, "Replaying queued pushes", queued=len(keys))

        succeeded = 0
        for pending in self._rebuild(keys):
            if await self._attempt(pending):
                succeeded += len(pending.payload)

        slog.step_complete(
            SyncStage.RETRY, "Retry pass finished", succeeded=succeeded, remaining=len(self._pending)
        )
        return succeeded

    def _rebuild(self, keys: list[tuple[Collection, str]]) -> list[PendingPush]:
        data = self._store.load()
        grouped: dict[Collection, list[str]] = {}
        for collection, entity_id in keys:
            grouped.setdefault(collection, []).append(entity_id)

        batch: list[PendingPush] = []
        for collection, ids in grouped.items():
            current = {e.id: e for e in getattr(data, collection.value)}
            upserts = [current[i] for i in ids if i in current]
            deletes = [i for i in ids if i not in current]
            if upserts:
                batch.append(PendingPush.upsert(collection, upserts))
            if deletes:
                batch.append(PendingPush.delete(collection, deletes))
        return batch

    async def _attempt(self, pending: PendingPush) -> bool:
        if self._remote is None or not pending.payload:
            return True

        stage = SyncStage.PUSH if pending.operation == UPSERT else SyncStage.DELETE
        name = pending.collection.value
        try:
            if pending.operation == UPSERT:
                await asyncio.wait_for(
                    self._upsert(TABLES[pending.collection], pending.payload), self._timeout
                )
            else:
                await asyncio.wait_for(
                    self._delete(TABLES[pending.collection], pending.payload), self._timeout
                )
        except Exception as exc:
            self._reporter.record_failure(pending.operation, name, exc)
            slog.step_warning(stage, f"{pending.operation} {name} failed", error=exc)
            self._enqueue(pending)
            return False

        for key in self._keys(pending):
            self._pending.pop(key, None)
        self._reporter.record_success(pending.operation, name, len(pending.payload))
        slog.step_complete(stage, f"{pending.operation} {name}", count=len(pending.payload))
        return True

    async def _upsert(self, spec: TableSpec, entities: tuple[Any, ...]) -> None:
        pairs = [rows_for(spec.collection, e) for e in entities if getattr(e, "id", "")]
        if not pairs:
            return
        await self._remote.upsert_rows(spec.table, [row for row, _ in pairs])
        if spec.child is None:
            return
        for row, children in pairs:
            await self._remote.replace_children(
                spec.child.table, spec.child.parent_column, row["id"], children
            )

    async def _delete(self, spec: TableSpec, ids: tuple[str, ...]) -> None:
        ids = [i for i in ids if i]
        if not ids:
            return
        if spec.child is not None:
            for parent_id in ids:
                await self._remote.replace_children(
                    spec.child.table, spec.child.parent_column, parent_id, []
                )
        await self._remote.delete_rows(spec.table, ids)

    @staticmethod
    def _keys(pending: PendingPush) -> list[tuple[Collection, str]]:
        if pending.operation == UPSERT:
            ids = [getattr(e, "id", "") for e in pending.payload]
        else:
            ids = list(pending.payload)
        return [(pending.collection, i) for i in ids if i]

    def _enqueue(self, pending: PendingPush) -> None:
        if self._retry_size == 0:
            return
        for key in self._keys(pending):
            self._pending.pop(key, None)
            self._pending[key] = None
        while len(self._pending) > self._retry_size:
            (collection, entity_id), _ = self._pending.popitem(last=False)
            slog.step_error(
                SyncStage.RETRY,
                f"Retry queue full; {collection.value} {entity_id} will not be mirrored",
            )
