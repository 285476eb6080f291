"""Remote mirror backed by SQLAlchemy — PostgreSQL (asyncpg) or SQLite (aiosqlite)."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Table, delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from atelier.application.interfaces import RemoteStore, Row
from atelier.domain.coercion import to_datetime, to_epoch_ms, to_iso
from atelier.domain.exceptions import RemoteStoreError
from atelier.infrastructure.database.models import (
    ClientModel,
    MaterialModel,
    ProductMaterialModel,
    ProductModel,
    QuoteItemModel,
    QuoteModel,
    ReceiptItemModel,
    ReceiptModel,
    TransactionModel,
)

logger = logging.getLogger(__name__)

_MODELS = (
    MaterialModel,
    ProductModel,
    ProductMaterialModel,
    ClientModel,
    QuoteModel,
    QuoteItemModel,
    ReceiptModel,
    ReceiptItemModel,
    TransactionModel,
)
_TABLES: dict[str, Table] = {model.__tablename__: model.__table__ for model in _MODELS}

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SQLAlchemyRemoteStore(RemoteStore):
    """Implements the RemoteStore port with one async session per operation.

    Separate sessions let the SyncEngine fetch tables concurrently. Dates
    travel as ISO-8601 strings at the port and as ``DateTime`` columns here.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @property
    def backend_name(self) -> str:
        return "database"

    def _table(self, name: str, operation: str) -> Table:
        table = _TABLES.get(name)
        if table is None:
            raise RemoteStoreError(self.backend_name, operation, f"unknown table '{name}'")
        return table

    def _to_row(self, table: Table, record: Any) -> Row:
        """Map a result mapping → port row (DateTime → ISO string)."""
        row = dict(record)
        for column in table.columns:
            value = row.get(column.name)
            if isinstance(column.type, DateTime) and isinstance(value, datetime):
                row[column.name] = to_iso(to_epoch_ms(value))
        return row

    def _to_values(self, table: Table, row: Row) -> dict[str, Any]:
        """Map a port row → column values, dropping keys the table lacks."""
        values = {}
        for column in table.columns:
            if column.name not in row:
                continue
            value = row[column.name]
            if isinstance(column.type, DateTime) and value is not None:
                value = to_datetime(to_epoch_ms(value))
            values[column.name] = value
        return values

    async def fetch_rows(self, table: str) -> list[Row]:
        model = self._table(table, "fetch")
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(model))
                return [self._to_row(model, r) for r in result.mappings().all()]
        except SQLAlchemyError as exc:
            raise RemoteStoreError(self.backend_name, f"fetch {table}", str(exc)) from exc

    async def upsert_rows(self, table: str, rows: list[Row]) -> None:
        if not rows:
            return
        model = self._table(table, "upsert")
        try:
            async with self._session_factory() as session:
                insert = _UPSERT_DIALECTS.get(session.bind.dialect.name)
                if insert is None:
                    raise RemoteStoreError(
                        self.backend_name,
                        f"upsert {table}",
                        f"dialect '{session.bind.dialect.name}' has no upsert",
                    )
                values = [self._to_values(model, row) for row in rows]
                stmt = insert(model).values(values)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[model.c.id],
                    set_={
                        c.name: stmt.excluded[c.name]
                        for c in model.columns
                        if c.name != "id" and c.name in values[0]
                    },
                )
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            raise RemoteStoreError(self.backend_name, f"upsert {table}", str(exc)) from exc
        logger.debug("Upserted %d row(s) into %s", len(rows), table)

    async def replace_children(
        self, table: str, parent_column: str, parent_id: str, rows: list[Row]
    ) -> None:
        model = self._table(table, "replace")
        if parent_column not in model.c:
            raise RemoteStoreError(
                self.backend_name, f"replace {table}", f"unknown column '{parent_column}'"
            )
        try:
            async with self._session_factory() as session:
                await session.execute(delete(model).where(model.c[parent_column] == parent_id))
                if rows:
                    values = [
                        {**self._to_values(model, row), parent_column: parent_id}
                        for row in rows
                    ]
                    await session.execute(model.insert(), values)
                await session.commit()
        except SQLAlchemyError as exc:
            raise RemoteStoreError(self.backend_name, f"replace {table}", str(exc)) from exc

    async def delete_rows(self, table: str, ids: list[str]) -> None:
        if not ids:
            return
        model = self._table(table, "delete")
        try:
            async with self._session_factory() as session:
                await session.execute(delete(model).where(model.c.id.in_(ids)))
                await session.commit()
        except SQLAlchemyError as exc:
            raise RemoteStoreError(self.backend_name, f"delete {table}", str(exc)) from exc
