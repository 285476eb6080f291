"""Unit tests for the Workspace facade."""

import asyncio
from pathlib import Path

import pytest

from atelier.application.interfaces import RemoteStore, Row
from atelier.application.services import (
    AppDataStore,
    QuoteDraft,
    SyncEngine,
    SyncStatusTracker,
    Workspace,
)
from atelier.domain.entities import (
    Client,
    Material,
    MaterialUnit,
    Product,
    ProductMaterialRequirement,
    QuoteItem,
    QuoteStatus,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from atelier.domain.coercion import to_datetime
from atelier.domain.exceptions import RemoteStoreError
from atelier.infrastructure.storage.local_snapshot_store import JsonSnapshotStore


class RecordingRemoteStore(RemoteStore):
    """Fake remote store that records calls and can be switched off."""

    def __init__(self):
        self.tables: dict[str, list[Row]] = {}
        self.calls: list[tuple[str, str]] = []
        self.down = False
        self.upsert_delay = 0.0

    @property
    def backend_name(self) -> str:
        return "recording"

    def _check(self) -> None:
        if self.down:
            raise RemoteStoreError("recording", "call", "offline")

    async def fetch_rows(self, table: str) -> list[Row]:
        self._check()
        return list(self.tables.get(table, []))

    async def upsert_rows(self, table: str, rows: list[Row]) -> None:
        if self.upsert_delay:
            await asyncio.sleep(self.upsert_delay)
        self._check()
        self.calls.append(("upsert", table))
        self.tables.setdefault(table, []).extend(rows)

    async def replace_children(
        self, table: str, parent_column: str, parent_id: str, rows: list[Row]
    ) -> None:
        self._check()
        self.calls.append(("replace", table))

    async def delete_rows(self, table: str, ids: list[str]) -> None:
        self._check()
        self.calls.append(("delete", table))


@pytest.fixture
def remote() -> RecordingRemoteStore:
    return RecordingRemoteStore()


@pytest.fixture
def workspace(tmp_path: Path, remote: RecordingRemoteStore) -> Workspace:
    store = JsonSnapshotStore(tmp_path / "data.json")
    engine = SyncEngine(store, remote, reporter=SyncStatusTracker(), timeout_ms=500)
    return Workspace(AppDataStore(store), engine)


@pytest.mark.asyncio
async def test_save_persists_locally_and_pushes(workspace: Workspace, remote: RecordingRemoteStore, tmp_path: Path):
    material = workspace.save_material(
        Material(name="Linen", unit=MaterialUnit.LINEAR, cost_per_unit=900, width_cm=140)
    )
    await workspace.drain()

    assert JsonSnapshotStore(tmp_path / "data.json").load().materials == (material,)
    assert remote.calls == [("upsert", "materials")]


@pytest.mark.asyncio
async def test_remote_outage_never_reaches_the_caller(workspace: Workspace, remote: RecordingRemoteStore):
    remote.down = True
    client = workspace.save_client(Client(name="Ana"))
    await workspace.drain()

    assert workspace.data.clients == (client,)
    status = workspace.sync_status()
    assert status.failures == {"upsert": 1}
    assert status.pending_retries == 1

    remote.down = False
    assert await workspace.retry_pending() == 1
    assert workspace.sync_status().pending_retries == 0
    await workspace.drain()


def test_writes_without_event_loop_are_deferred(workspace: Workspace, remote: RecordingRemoteStore):
    workspace.save_client(Client(name="Offline"))

    assert remote.calls == []
    assert workspace.sync_status().pending_retries == 1


@pytest.mark.asyncio
async def test_quote_and_receipt_flow_pushes_each_collection(workspace: Workspace, remote: RecordingRemoteStore):
    product = workspace.save_product(Product(name="Bag", base_labor_cost=100))
    outcome = workspace.save_quote(
        QuoteDraft(
            client_id="c1",
            items=(QuoteItem(product_id=product.id),),
            profit_margin_percent=50,
            status=QuoteStatus.ACCEPTED,
        )
    )
    assert outcome.receipt_offered

    issue = workspace.issue_receipt(outcome.quote.id, "cash")
    await workspace.drain()

    assert issue.receipt.total_price == pytest.approx(150.0)
    assert workspace.summary(*_year_month(issue.transaction.date)).monthly_income == pytest.approx(150.0)
    upserted = {table for op, table in remote.calls if op == "upsert"}
    assert upserted == {"products", "quotes", "receipts", "transactions"}


@pytest.mark.asyncio
async def test_settings_stay_local_across_refresh(workspace: Workspace, remote: RecordingRemoteStore):
    workspace.update_settings(brand_name="Renamed", whatsapp_number="+5491100000000")
    remote.tables["clients"] = [{"id": "r1", "name": "Remote"}]

    data = await workspace.refresh()

    assert data.settings.brand_name == "Renamed"
    assert data.settings.whatsapp_number == "+5491100000000"
    assert [c.id for c in data.clients] == ["r1"]
    assert remote.calls == []


@pytest.mark.asyncio
async def test_confirmed_import_pushes_new_rows_and_deletes_dropped(workspace: Workspace, remote: RecordingRemoteStore):
    old = workspace.record_transaction(
        kind=TransactionType.EXPENSE, category=TransactionCategory.RENT, amount=300
    )
    await workspace.drain()
    remote.calls.clear()

    new = Transaction(type=TransactionType.INCOME, category=TransactionCategory.INITIAL_CAPITAL, amount=1000)
    unchanged = workspace.import_transactions([new], confirmed=False)
    assert unchanged.transactions == (old,)

    workspace.import_transactions([new], confirmed=True)
    await workspace.drain()

    assert workspace.data.transactions == (new,)
    assert sorted(remote.calls) == [("delete", "transactions"), ("upsert", "transactions")]


def _year_month(epoch_ms: int) -> tuple[int, int]:
    when = to_datetime(epoch_ms)
    return when.year, when.month


@pytest.mark.asyncio
async def test_pushes_reach_the_mirror_in_write_order(workspace: Workspace, remote: RecordingRemoteStore):
    remote.upsert_delay = 0.05
    product = workspace.save_product(
        Product(name="Bag", materials=(ProductMaterialRequirement(material_id="m1", quantity=1),))
    )
    workspace.delete_product(product.id)
    await workspace.drain()

    assert remote.calls == [
        ("upsert", "products"),
        ("replace", "product_materials"),
        ("replace", "product_materials"),
        ("delete", "products"),
    ]


@pytest.mark.asyncio
async def test_refresh_runs_after_scheduled_pushes(workspace: Workspace, remote: RecordingRemoteStore):
    remote.upsert_delay = 0.05
    client = workspace.save_client(Client(name="Ana"))

    data = await workspace.refresh()
    await workspace.drain()

    assert [c.id for c in data.clients] == [client.id]
