"""Ledger operations — recording transactions and summarising the books."""

from collections.abc import Iterable
from dataclasses import dataclass

from atelier.application.services.entity_collections import Collection, upsert_entity
from atelier.domain.coercion import now_ms, to_datetime, to_number
from atelier.domain.entities import (
    AppData,
    Transaction,
    TransactionCategory,
    TransactionType,
)

_FALLBACK_CATEGORY = {
    TransactionType.INCOME: TransactionCategory.SALE,
    TransactionType.EXPENSE: TransactionCategory.OTHER,
}


@dataclass(frozen=True)
class LedgerSummary:
    balance: float
    monthly_income: float
    monthly_expense: float
    monthly_profit: float


def categories_for(kind: TransactionType) -> list[TransactionCategory]:
    """Categories allowed for a transaction type."""
    return [c for c in TransactionCategory if c.is_income == (kind is TransactionType.INCOME)]


def build_transaction(
    *,
    kind: TransactionType,
    category: TransactionCategory,
    amount: object,
    description: str = "",
    date: int | None = None,
    transaction_id: str | None = None,
) -> Transaction:
    """Build a ledger entry whose category always matches its type."""
    if category not in categories_for(kind):
        category = _FALLBACK_CATEGORY[kind]
    fields = dict(
        type=kind,
        category=category,
        amount=to_number(amount),
        description=description,
        date=date if date is not None else now_ms(),
    )
    if transaction_id:
        fields["id"] = transaction_id
    return Transaction(**fields)


def record_transaction(data: AppData, transaction: Transaction) -> AppData:
    return upsert_entity(data, Collection.TRANSACTIONS, transaction)


def summarize(
    transactions: Iterable[Transaction], year: int, month: int
) -> LedgerSummary:
    """All-time balance plus income, expense and profit for one UTC month."""
    balance = 0.0
    income = 0.0
    expense = 0.0
    for t in transactions:
        amount = to_number(t.amount)
        signed = amount if t.type is TransactionType.INCOME else -amount
        balance += signed

        when = to_datetime(t.date)
        if when.year != year or when.month != month:
            continue
        if t.type is TransactionType.INCOME:
            income += amount
        else:
            expense += amount

    return LedgerSummary(
        balance=balance,
        monthly_income=income,
        monthly_expense=expense,
        monthly_profit=income - expense,
    )
