"""Unit tests for the quote lifecycle."""

from dataclasses import replace

import pytest

from atelier.application.services.quote_lifecycle import (
    QuoteDraft,
    can_issue_receipt,
    is_newly_accepted,
    issue_receipt,
    issue_standalone_receipt,
    next_receipt_number,
    save_quote,
)
from atelier.domain.entities import (
    AppData,
    Material,
    MaterialUnit,
    Product,
    ProductMaterialRequirement,
    QuoteItem,
    QuoteStatus,
    Receipt,
    TransactionCategory,
    TransactionType,
)
from atelier.domain.exceptions import EntityNotFoundError, ReceiptAlreadyIssuedError


@pytest.fixture
def data() -> AppData:
    return AppData(products=(Product(id="bag", name="Bag", base_labor_cost=100),))


def _draft(**overrides) -> QuoteDraft:
    fields = dict(
        client_id="c1",
        items=(QuoteItem(product_id="bag", quantity=2),),
        profit_margin_percent=50,
    )
    fields.update(overrides)
    return QuoteDraft(**fields)


def test_is_newly_accepted_transitions():
    assert is_newly_accepted(None, QuoteStatus.ACCEPTED)
    assert is_newly_accepted(QuoteStatus.PENDING, QuoteStatus.ACCEPTED)
    assert is_newly_accepted(QuoteStatus.REJECTED, QuoteStatus.ACCEPTED)
    assert not is_newly_accepted(QuoteStatus.ACCEPTED, QuoteStatus.ACCEPTED)
    assert not is_newly_accepted(QuoteStatus.ACCEPTED, QuoteStatus.PENDING)


def test_save_quote_recomputes_totals(data: AppData):
    outcome = save_quote(data, _draft(discount_value=20), now=1000)

    assert outcome.quote.total_cost == pytest.approx(200.0)
    assert outcome.quote.total_price == pytest.approx(280.0)
    assert outcome.quote.created_at == 1000
    assert outcome.data.quotes == (outcome.quote,)
    assert not outcome.newly_accepted
    assert not outcome.receipt_offered


def test_quote_created_accepted_offers_receipt(data: AppData):
    outcome = save_quote(data, _draft(status=QuoteStatus.ACCEPTED))
    assert outcome.newly_accepted
    assert outcome.receipt_offered


def test_resaving_accepted_quote_does_not_reoffer(data: AppData):
    first = save_quote(data, _draft(status=QuoteStatus.ACCEPTED))
    second = save_quote(first.data, _draft(id=first.quote.id, status=QuoteStatus.ACCEPTED))

    assert not second.newly_accepted
    assert not second.receipt_offered


def test_edit_preserves_created_at_and_identity(data: AppData):
    first = save_quote(data, _draft(), now=1000)
    edited = save_quote(
        first.data,
        _draft(id=first.quote.id, items=(QuoteItem(product_id="bag", quantity=1),)),
        now=9999,
    )

    assert edited.quote.id == first.quote.id
    assert edited.quote.created_at == 1000
    assert edited.quote.total_cost == pytest.approx(100.0)
    assert len(edited.data.quotes) == 1


def test_resave_reprices_after_catalog_cost_changes():
    cord = Material(id="cord", name="Cord", unit=MaterialUnit.COUNT, cost_per_unit=10)
    bag = Product(
        id="bag",
        name="Bag",
        materials=(ProductMaterialRequirement(material_id="cord", quantity=3),),
        base_labor_cost=100,
    )
    first = save_quote(AppData(materials=(cord,), products=(bag,)), _draft(), now=1000)
    assert first.quote.total_cost == pytest.approx(260.0)
    assert first.quote.total_price == pytest.approx(390.0)

    repriced = replace(
        first.data,
        materials=(replace(cord, cost_per_unit=20),),
        products=(replace(bag, base_labor_cost=40),),
    )
    resaved = save_quote(repriced, _draft(id=first.quote.id), now=2000)

    assert resaved.quote.items == first.quote.items
    assert resaved.quote.total_cost == pytest.approx(200.0)
    assert resaved.quote.total_price == pytest.approx(300.0)
    assert resaved.quote.created_at == 1000


def test_issue_receipt_books_one_sale(data: AppData):
    saved = save_quote(data, _draft(status=QuoteStatus.ACCEPTED))
    issue = issue_receipt(saved.data, saved.quote.id, "cash")

    assert issue.receipt.receipt_number == "REC-00001"
    assert issue.receipt.quote_id == saved.quote.id
    assert issue.receipt.items == saved.quote.items
    assert issue.receipt.total_price == saved.quote.total_price
    assert issue.transaction.type is TransactionType.INCOME
    assert issue.transaction.category is TransactionCategory.SALE
    assert issue.transaction.amount == saved.quote.total_price
    assert issue.data.receipts == (issue.receipt,)
    assert issue.data.transactions == (issue.transaction,)
    assert not can_issue_receipt(issue.data, saved.quote.id)


def test_second_receipt_for_same_quote_is_rejected(data: AppData):
    saved = save_quote(data, _draft(status=QuoteStatus.ACCEPTED))
    issue = issue_receipt(saved.data, saved.quote.id, "cash")

    with pytest.raises(ReceiptAlreadyIssuedError):
        issue_receipt(issue.data, saved.quote.id, "card")


def test_reaccepting_quote_with_receipt_does_not_offer_another(data: AppData):
    saved = save_quote(data, _draft(status=QuoteStatus.ACCEPTED))
    issued = issue_receipt(saved.data, saved.quote.id, "cash").data
    reopened = save_quote(issued, _draft(id=saved.quote.id, status=QuoteStatus.PENDING))
    accepted = save_quote(reopened.data, _draft(id=saved.quote.id, status=QuoteStatus.ACCEPTED))

    assert accepted.newly_accepted
    assert not accepted.receipt_offered


def test_issue_receipt_for_unknown_quote(data: AppData):
    with pytest.raises(EntityNotFoundError):
        issue_receipt(data, "missing", "cash")


def test_next_receipt_number_follows_highest_suffix():
    receipts = [
        Receipt(client_id="c", items=(), total_price=0, receipt_number=n)
        for n in ("REC-00003", "REC-00010", "manual")
    ]
    assert next_receipt_number(receipts) == "REC-00011"
    assert next_receipt_number([]) == "REC-00001"


def test_standalone_receipt_priced_at_default_margin(data: AppData):
    issue = issue_standalone_receipt(
        data,
        client_id="walk-in",
        items=[QuoteItem(product_id="bag", quantity="2")],
        payment_method="transfer",
    )

    # default margin 50% on a cost of 200
    assert issue.receipt.total_price == pytest.approx(300.0)
    assert issue.receipt.quote_id is None
    assert issue.receipt.items[0].quantity == 2
    assert issue.transaction.amount == pytest.approx(300.0)


def test_standalone_receipt_with_explicit_total(data: AppData):
    issue = issue_standalone_receipt(
        data,
        client_id="walk-in",
        items=[QuoteItem(product_id="bag")],
        payment_method="cash",
        total_price=99,
    )
    assert issue.receipt.total_price == 99.0
