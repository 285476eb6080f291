"""Integration tests for the SQLAlchemy remote store on an aiosqlite database."""

from pathlib import Path

import pytest
import pytest_asyncio

from atelier.application.services.entity_collections import Collection
from atelier.application.services.sync_engine import SyncEngine
from atelier.domain.entities import (
    AppData,
    BusinessSettings,
    Product,
    ProductMaterialRequirement,
    Quote,
    QuoteItem,
    QuoteStatus,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from atelier.domain.exceptions import RemoteStoreError
from atelier.infrastructure.database import (
    SQLAlchemyRemoteStore,
    create_engine,
    create_session_factory,
    create_tables,
)
from atelier.infrastructure.storage.local_snapshot_store import JsonSnapshotStore


@pytest_asyncio.fixture
async def remote(tmp_path: Path):
    engine = create_engine(f"sqlite:///{tmp_path / 'remote.db'}")
    await create_tables(engine)
    yield SQLAlchemyRemoteStore(create_session_factory(engine))
    await engine.dispose()


@pytest.mark.asyncio
async def test_upsert_then_fetch_converts_dates(remote: SQLAlchemyRemoteStore):
    await remote.upsert_rows(
        "transactions",
        [
            {
                "id": "t1",
                "date": "2024-03-01T12:00:00.123Z",
                "type": "income",
                "category": "sale",
                "amount": 80.0,
                "description": "Sale REC-00001",
            }
        ],
    )
    await remote.upsert_rows(
        "transactions",
        [
            {
                "id": "t1",
                "date": "2024-03-01T12:00:00.123Z",
                "type": "income",
                "category": "sale",
                "amount": 95.0,
                "description": "corrected",
            }
        ],
    )

    rows = await remote.fetch_rows("transactions")

    assert len(rows) == 1
    assert rows[0]["amount"] == 95.0
    assert rows[0]["date"] == "2024-03-01T12:00:00.123Z"


@pytest.mark.asyncio
async def test_replace_children_and_delete(remote: SQLAlchemyRemoteStore):
    await remote.upsert_rows("products", [{"id": "p1", "name": "Bag"}])
    await remote.replace_children(
        "product_materials",
        "product_id",
        "p1",
        [{"material_id": "m1", "quantity": 1}, {"material_id": "m2", "quantity": 2}],
    )
    await remote.replace_children(
        "product_materials", "product_id", "p1", [{"material_id": "m3", "quantity": 3}]
    )

    children = await remote.fetch_rows("product_materials")
    assert [(c["product_id"], c["material_id"]) for c in children] == [("p1", "m3")]

    await remote.replace_children("product_materials", "product_id", "p1", [])
    await remote.delete_rows("products", ["p1"])

    assert await remote.fetch_rows("products") == []
    assert await remote.fetch_rows("product_materials") == []


@pytest.mark.asyncio
async def test_unknown_table_raises(remote: SQLAlchemyRemoteStore):
    with pytest.raises(RemoteStoreError):
        await remote.fetch_rows("invoices")


@pytest.mark.asyncio
async def test_push_then_fetch_round_trips_through_sync_engine(
    remote: SQLAlchemyRemoteStore, tmp_path: Path
):
    pushing = SyncEngine(JsonSnapshotStore(tmp_path / "a.json"), remote)
    product = Product(
        id="p1",
        name="Bag",
        materials=(ProductMaterialRequirement(material_id="m1", width_cm=40, height_cm=50),),
        base_labor_cost=100,
    )
    quote = Quote(
        id="q1",
        client_id="c1",
        items=(QuoteItem(product_id="p1", quantity=2, custom_price=180),),
        profit_margin_percent=50,
        status=QuoteStatus.ACCEPTED,
        total_cost=200,
        total_price=300,
        discount_reason="friend",
        created_at=1709294400000,
    )
    sale = Transaction(
        id="t1",
        type=TransactionType.INCOME,
        category=TransactionCategory.SALE,
        amount=300,
        date=1709294400000,
    )
    assert await pushing.push(Collection.PRODUCTS, [product])
    assert await pushing.push(Collection.QUOTES, [quote])
    assert await pushing.push(Collection.TRANSACTIONS, [sale])

    settings = BusinessSettings(brand_name="Second device")
    second_store = JsonSnapshotStore(tmp_path / "b.json", seed_settings=settings)
    data = await SyncEngine(second_store, remote).fetch_all()

    assert data.products == (product,)
    assert data.quotes == (quote,)
    assert data.transactions == (sale,)
    assert data.settings == settings
    assert second_store.load() == data


@pytest.mark.asyncio
async def test_local_snapshot_survives_unreachable_database(tmp_path: Path):
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'remote.db'}")
    store = JsonSnapshotStore(tmp_path / "local.json")
    local = AppData(settings=BusinessSettings(brand_name="Offline"))
    store.save(local)

    data = await SyncEngine(store, SQLAlchemyRemoteStore(create_session_factory(engine))).fetch_all()

    assert data == local
    await engine.dispose()
