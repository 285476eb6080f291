"""Pure transforms over AppData collections — every write returns a new AppData."""

import logging
from collections.abc import Iterable
from dataclasses import replace
from enum import Enum
from typing import Any, TypeVar

from atelier.domain.entities import AppData, Transaction

logger = logging.getLogger(__name__)

E = TypeVar("E")


class Collection(str, Enum):
    """The entity collections of AppData (also the remote parent table names)."""

    MATERIALS = "materials"
    PRODUCTS = "products"
    CLIENTS = "clients"
    QUOTES = "quotes"
    RECEIPTS = "receipts"
    TRANSACTIONS = "transactions"


def upsert(items: tuple[E, ...], entity: E) -> tuple[E, ...]:
    """Replace the item with the same id in place, or append the entity."""
    entity_id = getattr(entity, "id")
    replaced = False
    result = []
    for item in items:
        if getattr(item, "id") == entity_id:
            result.append(entity)
            replaced = True
        else:
            result.append(item)
    if not replaced:
        result.append(entity)
    return tuple(result)


def remove(items: tuple[E, ...], entity_id: str) -> tuple[E, ...]:
    """Filter out the item with *entity_id*; unknown ids are a no-op."""
    return tuple(item for item in items if getattr(item, "id") != entity_id)


def find(items: Iterable[E], entity_id: str) -> E | None:
    return next((item for item in items if getattr(item, "id") == entity_id), None)


def with_collection(data: AppData, collection: Collection, items: tuple[Any, ...]) -> AppData:
    return replace(data, **{collection.value: tuple(items)})


def upsert_entity(data: AppData, collection: Collection, entity: Any) -> AppData:
    current = getattr(data, collection.value)
    return with_collection(data, collection, upsert(current, entity))


def remove_entity(data: AppData, collection: Collection, entity_id: str) -> AppData:
    if collection in (Collection.QUOTES, Collection.RECEIPTS):
        raise ValueError(f"{collection.value} cannot be deleted")
    current = getattr(data, collection.value)
    return with_collection(data, collection, remove(current, entity_id))


def import_transactions(
    data: AppData, transactions: Iterable[Transaction], *, confirmed: bool
) -> AppData:
    """Overwrite the whole ledger — only once the operator has confirmed."""
    if not confirmed:
        logger.info("Transaction import not confirmed; ledger left unchanged")
        return data
    imported = tuple(transactions)
    logger.info(
        "Replacing %d ledger entries with %d imported ones",
        len(data.transactions),
        len(imported),
    )
    return with_collection(data, Collection.TRANSACTIONS, imported)
