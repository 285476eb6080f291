"""Translation between AppData entities and remote table rows.

Inbound, every row goes through its tagged row model (total coercion) and
child rows are folded into their owning entity. Outbound, an entity becomes
one parent row plus the rows of its owned children.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from atelier.application.interfaces import Row
from atelier.application.schemas.remote_rows import (
    ClientRow,
    MaterialRow,
    ProductMaterialRow,
    ProductRow,
    QuoteItemRow,
    QuoteRow,
    ReceiptItemRow,
    ReceiptRow,
    RemoteRow,
    TransactionRow,
)
from atelier.application.services.entity_collections import Collection
from atelier.domain.coercion import to_iso
from atelier.domain.entities import (
    AppData,
    BusinessSettings,
    Client,
    Material,
    Product,
    Quote,
    QuoteItem,
    Receipt,
    Transaction,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChildTable:
    table: str
    parent_column: str
    row_model: type[RemoteRow]


@dataclass(frozen=True)
class TableSpec:
    """Remote layout of one collection: its parent table and owned children."""

    collection: Collection
    row_model: type[RemoteRow]
    child: ChildTable | None = None

    @property
    def table(self) -> str:
        return self.row_model.TABLE

    @property
    def tables(self) -> list[str]:
        return [self.table] + ([self.child.table] if self.child else [])


TABLES: dict[Collection, TableSpec] = {
    Collection.MATERIALS: TableSpec(Collection.MATERIALS, MaterialRow),
    Collection.PRODUCTS: TableSpec(
        Collection.PRODUCTS,
        ProductRow,
        ChildTable(ProductMaterialRow.TABLE, "product_id", ProductMaterialRow),
    ),
    Collection.CLIENTS: TableSpec(Collection.CLIENTS, ClientRow),
    Collection.QUOTES: TableSpec(
        Collection.QUOTES,
        QuoteRow,
        ChildTable(QuoteItemRow.TABLE, "quote_id", QuoteItemRow),
    ),
    Collection.RECEIPTS: TableSpec(
        Collection.RECEIPTS,
        ReceiptRow,
        ChildTable(ReceiptItemRow.TABLE, "receipt_id", ReceiptItemRow),
    ),
    Collection.TRANSACTIONS: TableSpec(Collection.TRANSACTIONS, TransactionRow),
}


# ── Inbound ──────────────────────────────────────────────────────────


def _parse(rows: Iterable[Any], model: type[RemoteRow]) -> list[Any]:
    return [model.model_validate(row) for row in rows if isinstance(row, Mapping)]


def _with_id(rows: list[Any], table: str) -> list[Any]:
    kept = [row for row in rows if row.id]
    skipped = len(rows) - len(kept)
    if skipped:
        logger.warning("Skipped %d %s row(s) without an id", skipped, table)
    return kept


def _children_by_parent(tables: Mapping[str, list[Row]], spec: TableSpec) -> dict[str, list]:
    grouped: dict[str, list] = defaultdict(list)
    if spec.child is None:
        return grouped
    for row in _parse(tables.get(spec.child.table) or [], spec.child.row_model):
        parent_id = getattr(row, spec.child.parent_column)
        if parent_id:
            grouped[parent_id].append(row.to_entity())
    return grouped


def _parents(tables: Mapping[str, list[Row]], spec: TableSpec) -> list[Any]:
    return _with_id(_parse(tables.get(spec.table) or [], spec.row_model), spec.table)


def normalize_remote(tables: Mapping[str, list[Row]], settings: BusinessSettings) -> AppData:
    """Build AppData from raw remote rows keyed by table name.

    *settings* is pinned as-is: remote data never carries settings.
    """
    materials = tuple(
        row.to_entity() for row in _parents(tables, TABLES[Collection.MATERIALS])
    )
    clients = tuple(row.to_entity() for row in _parents(tables, TABLES[Collection.CLIENTS]))
    transactions = tuple(
        row.to_entity() for row in _parents(tables, TABLES[Collection.TRANSACTIONS])
    )

    spec = TABLES[Collection.PRODUCTS]
    requirements = _children_by_parent(tables, spec)
    products = tuple(
        Product(
            id=row.id,
            name=row.name,
            description=row.description,
            materials=tuple(requirements.get(row.id, ())),
            base_labor_cost=row.base_labor_cost,
            image_url=row.image_url,
        )
        for row in _parents(tables, spec)
    )

    spec = TABLES[Collection.QUOTES]
    quote_items = _children_by_parent(tables, spec)
    quotes = tuple(
        Quote(
            id=row.id,
            client_id=row.client_id,
            items=tuple(quote_items.get(row.id, ())),
            profit_margin_percent=row.profit_margin_percent,
            status=row.status,
            total_cost=row.total_cost,
            total_price=row.total_price,
            discount_value=row.discount_value,
            discount_reason=row.discount_reason,
            created_at=row.created_at,
        )
        for row in _parents(tables, spec)
    )

    spec = TABLES[Collection.RECEIPTS]
    receipt_items = _children_by_parent(tables, spec)
    receipts = tuple(
        Receipt(
            id=row.id,
            quote_id=row.quote_id,
            client_id=row.client_id,
            items=tuple(receipt_items.get(row.id, ())),
            total_price=row.total_price,
            discount_value=row.discount_value,
            payment_method=row.payment_method,
            receipt_number=row.receipt_number,
            created_at=row.created_at,
        )
        for row in _parents(tables, spec)
    )

    return AppData(
        materials=materials,
        products=products,
        clients=clients,
        quotes=quotes,
        receipts=receipts,
        transactions=transactions,
        settings=settings,
    )


# ── Outbound ─────────────────────────────────────────────────────────


def _item_rows(items: Iterable[QuoteItem], parent_column: str, parent_id: str) -> list[Row]:
    return [
        {
            parent_column: parent_id,
            "product_id": item.product_id,
            "quantity": item.quantity,
            "custom_price": item.custom_price,
        }
        for item in items
    ]


def _material_rows(m: Material) -> tuple[Row, list[Row]]:
    return {
        "id": m.id,
        "name": m.name,
        "unit": m.unit.value,
        "cost_per_unit": m.cost_per_unit,
        "width_cm": m.width_cm,
    }, []


def _product_rows(p: Product) -> tuple[Row, list[Row]]:
    children = [
        {
            "product_id": p.id,
            "material_id": r.material_id,
            "quantity": r.quantity,
            "width_cm": r.width_cm,
            "height_cm": r.height_cm,
        }
        for r in p.materials
    ]
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description,
        "base_labor_cost": p.base_labor_cost,
        "image_url": p.image_url,
    }, children


def _client_rows(c: Client) -> tuple[Row, list[Row]]:
    return {
        "id": c.id,
        "name": c.name,
        "phone": c.phone,
        "email": c.email,
        "address": c.address,
    }, []


def _quote_rows(q: Quote) -> tuple[Row, list[Row]]:
    return {
        "id": q.id,
        "client_id": q.client_id,
        "profit_margin_percent": q.profit_margin_percent,
        "total_cost": q.total_cost,
        "total_price": q.total_price,
        "status": q.status.value,
        "discount_value": q.discount_value,
        "discount_reason": q.discount_reason,
        "created_at": to_iso(q.created_at),
    }, _item_rows(q.items, "quote_id", q.id)


def _receipt_rows(r: Receipt) -> tuple[Row, list[Row]]:
    return {
        "id": r.id,
        "quote_id": r.quote_id,
        "client_id": r.client_id,
        "total_price": r.total_price,
        "discount_value": r.discount_value,
        "payment_method": r.payment_method,
        "receipt_number": r.receipt_number,
        "created_at": to_iso(r.created_at),
    }, _item_rows(r.items, "receipt_id", r.id)


def _transaction_rows(t: Transaction) -> tuple[Row, list[Row]]:
    return {
        "id": t.id,
        "date": to_iso(t.date),
        "type": t.type.value,
        "category": t.category.value,
        "amount": t.amount,
        "description": t.description,
    }, []


_SERIALIZERS = {
    Collection.MATERIALS: _material_rows,
    Collection.PRODUCTS: _product_rows,
    Collection.CLIENTS: _client_rows,
    Collection.QUOTES: _quote_rows,
    Collection.RECEIPTS: _receipt_rows,
    Collection.TRANSACTIONS: _transaction_rows,
}


def rows_for(collection: Collection, entity: Any) -> tuple[Row, list[Row]]:
    """Return ``(parent_row, child_rows)`` for one entity."""
    return _SERIALIZERS[collection](entity)
