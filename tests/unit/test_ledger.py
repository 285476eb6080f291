"""Unit tests for ledger operations and entity collection transforms."""

import pytest

from atelier.application.services.entity_collections import (
    Collection,
    import_transactions,
    remove_entity,
    upsert_entity,
)
from atelier.application.services.ledger import (
    build_transaction,
    categories_for,
    record_transaction,
    summarize,
)
from atelier.domain.entities import (
    AppData,
    Client,
    Transaction,
    TransactionCategory,
    TransactionType,
)

# 2024-03-31T23:30:00Z and 2024-04-01T00:30:00Z
MARCH_END = 1711927800000
APRIL_START = 1711931400000


def _income(amount: float, date: int) -> Transaction:
    return Transaction(
        type=TransactionType.INCOME, category=TransactionCategory.SALE, amount=amount, date=date
    )


def _expense(amount: float, date: int) -> Transaction:
    return Transaction(
        type=TransactionType.EXPENSE, category=TransactionCategory.RENT, amount=amount, date=date
    )


def test_categories_for_each_type():
    assert set(categories_for(TransactionType.INCOME)) == {
        TransactionCategory.SALE,
        TransactionCategory.INITIAL_CAPITAL,
    }
    assert TransactionCategory.RENT in categories_for(TransactionType.EXPENSE)
    assert TransactionCategory.SALE not in categories_for(TransactionType.EXPENSE)


def test_mismatched_category_falls_back():
    income = build_transaction(
        kind=TransactionType.INCOME, category=TransactionCategory.RENT, amount="150"
    )
    expense = build_transaction(
        kind=TransactionType.EXPENSE, category=TransactionCategory.SALE, amount="oops"
    )

    assert income.category is TransactionCategory.SALE
    assert income.amount == 150.0
    assert expense.category is TransactionCategory.OTHER
    assert expense.amount == 0.0


def test_legacy_category_codes_are_translated():
    assert TransactionCategory.parse("materia_prima") is TransactionCategory.RAW_MATERIAL
    assert TransactionCategory.parse("capital_inicial") is TransactionCategory.INITIAL_CAPITAL
    assert TransactionCategory.parse("something-else") is TransactionCategory.OTHER


def test_summarize_splits_months_in_utc():
    transactions = [
        _income(500, MARCH_END),
        _expense(200, MARCH_END),
        _income(100, APRIL_START),
    ]

    march = summarize(transactions, 2024, 3)
    april = summarize(transactions, 2024, 4)

    assert march.balance == pytest.approx(400.0)
    assert march.monthly_income == pytest.approx(500.0)
    assert march.monthly_expense == pytest.approx(200.0)
    assert march.monthly_profit == pytest.approx(300.0)
    assert april.monthly_income == pytest.approx(100.0)
    assert april.monthly_expense == 0.0


def test_record_transaction_replaces_same_id():
    original = _income(10, MARCH_END)
    data = record_transaction(AppData(), original)
    corrected = Transaction(
        id=original.id,
        type=TransactionType.INCOME,
        category=TransactionCategory.SALE,
        amount=12,
        date=MARCH_END,
    )
    data = record_transaction(data, corrected)
    assert data.transactions == (corrected,)


def test_upsert_keeps_order_and_remove_is_lenient():
    a, b = Client(id="a", name="Ana"), Client(id="b", name="Bea")
    data = upsert_entity(AppData(), Collection.CLIENTS, a)
    data = upsert_entity(data, Collection.CLIENTS, b)
    data = upsert_entity(data, Collection.CLIENTS, Client(id="a", name="Ana María"))

    assert [c.name for c in data.clients] == ["Ana María", "Bea"]
    assert remove_entity(data, Collection.CLIENTS, "nobody") == data
    assert [c.id for c in remove_entity(data, Collection.CLIENTS, "a").clients] == ["b"]


def test_quotes_and_receipts_cannot_be_removed():
    with pytest.raises(ValueError):
        remove_entity(AppData(), Collection.QUOTES, "q1")
    with pytest.raises(ValueError):
        remove_entity(AppData(), Collection.RECEIPTS, "r1")


def test_import_requires_confirmation():
    data = record_transaction(AppData(), _income(10, MARCH_END))
    imported = [_expense(5, APRIL_START)]

    assert import_transactions(data, imported, confirmed=False) is data
    assert import_transactions(data, imported, confirmed=True).transactions == tuple(imported)
