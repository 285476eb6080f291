"""Unit tests for the SyncEngine."""

import asyncio
import logging

import pytest

from atelier.application.interfaces import RemoteStore, Row, SnapshotStore
from atelier.application.services.entity_collections import Collection
from atelier.application.services.sync_engine import SyncEngine
from atelier.application.services.sync_status_tracker import SyncStatusTracker
from atelier.domain.entities import (
    AppData,
    BusinessSettings,
    Client,
    Product,
    ProductMaterialRequirement,
)
from atelier.domain.exceptions import RemoteStoreError


class FakeSnapshotStore(SnapshotStore):
    """In-memory fake snapshot store that counts saves."""

    def __init__(self, data: AppData | None = None):
        self.data = data or AppData()
        self.saves = 0

    def load(self) -> AppData:
        return self.data

    def save(self, data: AppData) -> None:
        self.data = data
        self.saves += 1


class FakeRemoteStore(RemoteStore):
    """In-memory fake remote store with switchable failures."""

    def __init__(self, tables: dict[str, list[Row]] | None = None):
        self.tables: dict[str, list[Row]] = tables or {}
        self.failing: set[str] = set()
        self.fail_all = False
        self.read_only = False
        self.delay = 0.0
        self.calls: list[tuple] = []

    @property
    def backend_name(self) -> str:
        return "fake"

    async def _maybe_fail(self, table: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_all or table in self.failing:
            raise RemoteStoreError("fake", table, "unavailable")

    def _check_writable(self, table: str) -> None:
        if self.read_only:
            raise RemoteStoreError("fake", table, "read-only")

    async def fetch_rows(self, table: str) -> list[Row]:
        await self._maybe_fail(table)
        return list(self.tables.get(table, []))

    async def upsert_rows(self, table: str, rows: list[Row]) -> None:
        await self._maybe_fail(table)
        self._check_writable(table)
        self.calls.append(("upsert", table, [r["id"] for r in rows]))
        existing = {r["id"]: r for r in self.tables.get(table, [])}
        existing.update({r["id"]: r for r in rows})
        self.tables[table] = list(existing.values())

    async def replace_children(
        self, table: str, parent_column: str, parent_id: str, rows: list[Row]
    ) -> None:
        await self._maybe_fail(table)
        self._check_writable(table)
        self.calls.append(("replace", table, parent_id, len(rows)))
        kept = [r for r in self.tables.get(table, []) if r[parent_column] != parent_id]
        self.tables[table] = kept + rows

    async def delete_rows(self, table: str, ids: list[str]) -> None:
        await self._maybe_fail(table)
        self._check_writable(table)
        self.calls.append(("delete", table, list(ids)))
        self.tables[table] = [r for r in self.tables.get(table, []) if r["id"] not in ids]


LOCAL_SETTINGS = BusinessSettings(brand_name="Local", default_margin=70)
LOCAL = AppData(clients=(Client(id="local", name="Local client"),), settings=LOCAL_SETTINGS)
REMOTE_TABLES = {
    "clients": [{"id": "remote", "name": "Remote client"}],
    "products": [{"id": "p1", "name": "Bag"}],
    "product_materials": [{"product_id": "p1", "material_id": "m1", "quantity": 2}],
}


def _engine(remote: RemoteStore | None, store: FakeSnapshotStore, **kwargs) -> SyncEngine:
    kwargs.setdefault("reporter", SyncStatusTracker())
    return SyncEngine(store, remote, **kwargs)


@pytest.mark.asyncio
async def test_fetch_without_remote_returns_local():
    store = FakeSnapshotStore(LOCAL)
    assert await _engine(None, store).fetch_all() is LOCAL
    assert store.saves == 0


@pytest.mark.asyncio
async def test_fetch_merges_remote_but_keeps_local_settings():
    store = FakeSnapshotStore(LOCAL)
    engine = _engine(FakeRemoteStore(dict(REMOTE_TABLES)), store)

    data = await engine.fetch_all()

    assert [c.id for c in data.clients] == ["remote"]
    assert data.products[0].materials[0].quantity == 2.0
    assert data.settings == LOCAL_SETTINGS
    assert store.data == data
    assert store.saves == 1


@pytest.mark.asyncio
async def test_one_failing_collection_abandons_the_merge():
    remote = FakeRemoteStore(dict(REMOTE_TABLES))
    remote.failing.add("transactions")
    store = FakeSnapshotStore(LOCAL)
    tracker = SyncStatusTracker()

    data = await _engine(remote, store, reporter=tracker).fetch_all()

    assert data is LOCAL
    assert store.saves == 0
    status = tracker.snapshot()
    assert status.failures == {"fetch": 1}
    assert "unavailable" in status.last_failure.error


@pytest.mark.asyncio
async def test_slow_remote_times_out_to_local():
    remote = FakeRemoteStore(dict(REMOTE_TABLES))
    remote.delay = 5.0
    store = FakeSnapshotStore(LOCAL)

    data = await _engine(remote, store, timeout_ms=20).fetch_all()

    assert data is LOCAL
    assert data.settings == LOCAL_SETTINGS


@pytest.mark.asyncio
async def test_push_upserts_parent_then_replaces_children():
    remote = FakeRemoteStore()
    engine = _engine(remote, FakeSnapshotStore())
    product = Product(
        id="p1",
        name="Bag",
        materials=(ProductMaterialRequirement(material_id="m1", quantity=1),),
    )

    assert await engine.push(Collection.PRODUCTS, [product])

    assert remote.calls == [
        ("upsert", "products", ["p1"]),
        ("replace", "product_materials", "p1", 1),
    ]


@pytest.mark.asyncio
async def test_entities_without_id_are_not_pushed():
    remote = FakeRemoteStore()
    engine = _engine(remote, FakeSnapshotStore())

    assert await engine.push(Collection.CLIENTS, [Client(id="", name="Nobody")])
    assert remote.calls == []


@pytest.mark.asyncio
async def test_deletions_remove_children_first():
    remote = FakeRemoteStore()
    engine = _engine(remote, FakeSnapshotStore())

    await engine.push_deletions(Collection.PRODUCTS, ["p1", "p2"])

    assert remote.calls == [
        ("replace", "product_materials", "p1", 0),
        ("replace", "product_materials", "p2", 0),
        ("delete", "products", ["p1", "p2"]),
    ]


@pytest.mark.asyncio
async def test_failed_push_is_swallowed_and_retried():
    remote = FakeRemoteStore()
    remote.fail_all = True
    tracker = SyncStatusTracker()
    ana = Client(id="c1", name="Ana")
    engine = _engine(remote, FakeSnapshotStore(AppData(clients=(ana,))), reporter=tracker)

    ok = await engine.push(Collection.CLIENTS, [ana])

    assert ok is False
    assert engine.pending_count == 1
    assert tracker.snapshot().failures == {"upsert": 1}

    remote.fail_all = False
    assert await engine.retry_pending() == 1
    assert engine.pending_count == 0
    assert remote.tables["clients"][0]["name"] == "Ana"


@pytest.mark.asyncio
async def test_retry_queue_is_bounded(caplog):
    remote = FakeRemoteStore()
    remote.fail_all = True
    clients = tuple(Client(id=f"c{i}", name="x") for i in range(3))
    engine = _engine(remote, FakeSnapshotStore(AppData(clients=clients)), retry_queue_size=2)

    with caplog.at_level(logging.ERROR, logger="SyncEngine"):
        for client in clients:
            await engine.push(Collection.CLIENTS, [client])

    assert engine.pending_count == 2
    assert "clients c0 will not be mirrored" in caplog.text

    remote.fail_all = False
    await engine.retry_pending()
    assert sorted(r["id"] for r in remote.tables["clients"]) == ["c1", "c2"]


@pytest.mark.asyncio
async def test_zero_queue_size_disables_retries():
    remote = FakeRemoteStore()
    remote.fail_all = True
    engine = _engine(remote, FakeSnapshotStore(), retry_queue_size=0)

    await engine.push(Collection.CLIENTS, [Client(id="c1", name="x")])

    assert engine.pending_count == 0


@pytest.mark.asyncio
async def test_retry_requeues_what_still_fails():
    remote = FakeRemoteStore()
    remote.fail_all = True
    engine = _engine(remote, FakeSnapshotStore())
    await engine.push(Collection.CLIENTS, [Client(id="c1", name="x")])

    assert await engine.retry_pending() == 0
    assert engine.pending_count == 1


@pytest.mark.asyncio
async def test_newer_push_supersedes_a_queued_failure():
    remote = FakeRemoteStore()
    store = FakeSnapshotStore(AppData(clients=(Client(id="c1", name="Old name"),)))
    engine = _engine(remote, store)

    remote.fail_all = True
    await engine.push(Collection.CLIENTS, [Client(id="c1", name="Old name")])
    assert engine.pending_count == 1

    remote.fail_all = False
    renamed = Client(id="c1", name="New name")
    store.data = AppData(clients=(renamed,))
    assert await engine.push(Collection.CLIENTS, [renamed])

    assert engine.pending_count == 0
    assert await engine.retry_pending() == 0
    data = await engine.fetch_all()
    assert data.clients == (renamed,)


@pytest.mark.asyncio
async def test_retry_sends_the_current_local_version():
    remote = FakeRemoteStore()
    store = FakeSnapshotStore(AppData(clients=(Client(id="c1", name="Old name"),)))
    engine = _engine(remote, store)

    remote.fail_all = True
    await engine.push(Collection.CLIENTS, [Client(id="c1", name="Old name")])
    store.data = AppData(clients=(Client(id="c1", name="New name"),))

    remote.fail_all = False
    assert await engine.retry_pending() == 1
    assert remote.tables["clients"][0]["name"] == "New name"


@pytest.mark.asyncio
async def test_deleted_entity_is_not_resurrected_by_retry():
    remote = FakeRemoteStore()
    store = FakeSnapshotStore(AppData(clients=(Client(id="c1", name="Gone"),)))
    engine = _engine(remote, store)

    remote.fail_all = True
    await engine.push(Collection.CLIENTS, [Client(id="c1", name="Gone")])

    remote.fail_all = False
    store.data = AppData()
    assert await engine.push_deletions(Collection.CLIENTS, ["c1"])
    await engine.retry_pending()

    assert remote.tables["clients"] == []
    assert (await engine.fetch_all()).clients == ()


@pytest.mark.asyncio
async def test_retry_of_a_locally_deleted_entity_deletes_it_remotely():
    remote = FakeRemoteStore({"clients": [{"id": "c1", "name": "Gone"}]})
    store = FakeSnapshotStore(AppData(clients=(Client(id="c1", name="Gone"),)))
    engine = _engine(remote, store)

    remote.fail_all = True
    await engine.push(Collection.CLIENTS, [Client(id="c1", name="Gone")])
    store.data = AppData()

    remote.fail_all = False
    assert await engine.retry_pending() == 1
    assert remote.calls == [("delete", "clients", ["c1"])]
    assert remote.tables["clients"] == []


@pytest.mark.asyncio
async def test_unmirrored_changes_block_the_merge():
    remote = FakeRemoteStore(dict(REMOTE_TABLES))
    store = FakeSnapshotStore(LOCAL)
    engine = _engine(remote, store)

    remote.read_only = True
    await engine.push(Collection.CLIENTS, list(LOCAL.clients))

    data = await engine.fetch_all()

    assert data == LOCAL
    assert store.saves == 0
    assert engine.pending_count == 1


@pytest.mark.asyncio
async def test_fetch_replays_queued_changes_before_merging():
    remote = FakeRemoteStore(dict(REMOTE_TABLES))
    store = FakeSnapshotStore(LOCAL)
    engine = _engine(remote, store)

    remote.read_only = True
    await engine.push(Collection.CLIENTS, list(LOCAL.clients))
    remote.read_only = False

    data = await engine.fetch_all()

    assert sorted(c.id for c in data.clients) == ["local", "remote"]
    assert engine.pending_count == 0
