"""Workspace — the session facade binding local state to the SyncEngine.

Every write applies a pure transform, persists it synchronously and then
schedules a fire-and-forget push of the touched collection. Pushes run in
write order on one background worker; the caller never waits on them.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import replace
from functools import partial
from typing import Any, TypeVar

from atelier.application.services import ledger, pricing_engine, quote_lifecycle
from atelier.application.services.app_state import AppDataStore
from atelier.application.services.entity_collections import (
    Collection,
    import_transactions,
    remove_entity,
    upsert_entity,
)
from atelier.application.services.sync_engine import DELETE, PendingPush, SyncEngine
from atelier.application.services.sync_status_tracker import SyncStatus, SyncStatusTracker
from atelier.domain.entities import (
    AppData,
    BusinessSettings,
    Client,
    Material,
    Product,
    QuoteItem,
    Transaction,
    TransactionCategory,
    TransactionType,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Workspace:
    """One operator session over the business data set."""

    def __init__(self, state: AppDataStore, sync: SyncEngine):
        self._state = state
        self._sync = sync
        self._queue: asyncio.Queue | None = None
        self._worker: asyncio.Task | None = None

    @property
    def data(self) -> AppData:
        return self._state.current

    @property
    def sync_backend(self) -> str:
        return self._sync.backend_name

    # ── Sync ─────────────────────────────────────────────────────────

    async def refresh(self) -> AppData:
        """Reconcile with the remote mirror and adopt the result.

        Runs behind every push already scheduled.
        """
        return self._state.reset(await self._submit(self._sync.fetch_all))

    async def drain(self) -> None:
        """Wait for every scheduled push to settle, then stop the worker."""
        worker = self._worker
        if worker is None:
            return
        if not worker.done():
            await self._queue.join()
            worker.cancel()
            try:
                await worker
            except asyncio.CancelledError:
                pass
        self._worker = None
        self._queue = None

    async def retry_pending(self) -> int:
        return await self._submit(self._sync.retry_pending)

    def sync_status(self) -> SyncStatus:
        reporter = self._sync.reporter
        if isinstance(reporter, SyncStatusTracker):
            return reporter.snapshot(pending_retries=self._sync.pending_count)
        return SyncStatus({}, {}, None, None, pending_retries=self._sync.pending_count)

    # Remote work runs one job at a time on a single worker task, so pushes
    # reach the mirror in the order the local writes happened.

    def _jobs(self) -> asyncio.Queue:
        loop = asyncio.get_running_loop()
        if self._worker is None or self._worker.done() or self._worker.get_loop() is not loop:
            self._queue = asyncio.Queue()
            self._worker = loop.create_task(self._run_jobs(self._queue))
        return self._queue

    async def _run_jobs(self, queue: asyncio.Queue) -> None:
        while True:
            job, future = await queue.get()
            try:
                result = await job()
            except Exception as exc:
                if future is None:
                    logger.exception("Background sync job failed")
                elif not future.done():
                    future.set_exception(exc)
            else:
                if future is not None and not future.done():
                    future.set_result(result)
            finally:
                queue.task_done()

    async def _submit(self, job: Callable[[], Awaitable[T]]) -> T:
        if not self._sync.enabled:
            return await job()
        future = asyncio.get_running_loop().create_future()
        self._jobs().put_nowait((job, future))
        return await future

    def _schedule(self, pending: PendingPush) -> None:
        if not self._sync.enabled or not pending.payload:
            return
        try:
            jobs = self._jobs()
        except RuntimeError:
            self._sync.defer(pending)
            return
        if pending.operation == DELETE:
            job = partial(self._sync.push_deletions, pending.collection, pending.payload)
        else:
            job = partial(self._sync.push, pending.collection, pending.payload)
        jobs.put_nowait((job, None))

    def _save(self, collection: Collection, entity: Any) -> Any:
        self._state.apply(lambda data: upsert_entity(data, collection, entity))
        self._schedule(PendingPush.upsert(collection, [entity]))
        return entity

    def _delete(self, collection: Collection, entity_id: str) -> None:
        self._state.apply(lambda data: remove_entity(data, collection, entity_id))
        self._schedule(PendingPush.delete(collection, [entity_id]))

    # ── Catalog ──────────────────────────────────────────────────────

    def save_material(self, material: Material) -> Material:
        return self._save(Collection.MATERIALS, material)

    def delete_material(self, material_id: str) -> None:
        self._delete(Collection.MATERIALS, material_id)

    def save_product(self, product: Product) -> Product:
        return self._save(Collection.PRODUCTS, product)

    def delete_product(self, product_id: str) -> None:
        self._delete(Collection.PRODUCTS, product_id)

    def save_client(self, client: Client) -> Client:
        return self._save(Collection.CLIENTS, client)

    def delete_client(self, client_id: str) -> None:
        self._delete(Collection.CLIENTS, client_id)

    # ── Quotes & receipts ────────────────────────────────────────────

    def save_quote(self, draft: quote_lifecycle.QuoteDraft) -> quote_lifecycle.QuoteSaveOutcome:
        outcome = quote_lifecycle.save_quote(self.data, draft)
        self._state.save(outcome.data)
        self._schedule(PendingPush.upsert(Collection.QUOTES, [outcome.quote]))
        return outcome

    def issue_receipt(self, quote_id: str, payment_method: str) -> quote_lifecycle.ReceiptIssue:
        issue = quote_lifecycle.issue_receipt(self.data, quote_id, payment_method)
        return self._commit_receipt(issue)

    def issue_standalone_receipt(
        self,
        *,
        client_id: str,
        items: Iterable[QuoteItem],
        payment_method: str,
        discount_value: float = 0.0,
        total_price: float | None = None,
    ) -> quote_lifecycle.ReceiptIssue:
        issue = quote_lifecycle.issue_standalone_receipt(
            self.data,
            client_id=client_id,
            items=items,
            payment_method=payment_method,
            discount_value=discount_value,
            total_price=total_price,
        )
        return self._commit_receipt(issue)

    def _commit_receipt(self, issue: quote_lifecycle.ReceiptIssue) -> quote_lifecycle.ReceiptIssue:
        self._state.save(issue.data)
        self._schedule(PendingPush.upsert(Collection.RECEIPTS, [issue.receipt]))
        self._schedule(PendingPush.upsert(Collection.TRANSACTIONS, [issue.transaction]))
        return issue

    def preview_quote(
        self, items: Iterable[QuoteItem], margin_percent: float, discount_value: float = 0.0
    ) -> pricing_engine.QuotePreview:
        data = self.data
        return pricing_engine.preview_quote(
            items, data.products, data.materials, margin_percent, discount_value
        )

    def catalog(self) -> list[pricing_engine.CatalogPrice]:
        return pricing_engine.catalog_prices(self.data)

    # ── Ledger ───────────────────────────────────────────────────────

    def record_transaction(
        self,
        *,
        kind: TransactionType,
        category: TransactionCategory,
        amount: object,
        description: str = "",
        date: int | None = None,
        transaction_id: str | None = None,
    ) -> Transaction:
        transaction = ledger.build_transaction(
            kind=kind,
            category=category,
            amount=amount,
            description=description,
            date=date,
            transaction_id=transaction_id,
        )
        return self._save(Collection.TRANSACTIONS, transaction)

    def delete_transaction(self, transaction_id: str) -> None:
        self._delete(Collection.TRANSACTIONS, transaction_id)

    def import_transactions(
        self, transactions: Iterable[Transaction], *, confirmed: bool
    ) -> AppData:
        """Replace the ledger; the mirror gets the new rows and loses the dropped ones."""
        if not confirmed:
            return import_transactions(self.data, transactions, confirmed=False)
        previous = self.data.transactions
        updated = self._state.apply(
            lambda data: import_transactions(data, transactions, confirmed=True)
        )
        kept = {t.id for t in updated.transactions}
        dropped = [t.id for t in previous if t.id not in kept]
        self._schedule(PendingPush.upsert(Collection.TRANSACTIONS, updated.transactions))
        self._schedule(PendingPush.delete(Collection.TRANSACTIONS, dropped))
        return updated

    def summary(self, year: int, month: int) -> ledger.LedgerSummary:
        return ledger.summarize(self.data.transactions, year, month)

    # ── Settings (local only) ────────────────────────────────────────

    def update_settings(self, **changes: Any) -> BusinessSettings:
        data = self._state.apply(
            lambda current: replace(current, settings=replace(current.settings, **changes))
        )
        logger.info("Settings updated: %s", ", ".join(sorted(changes)) or "no changes")
        return data.settings
