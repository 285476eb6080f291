"""Quote lifecycle — saving quotes, detecting acceptance, issuing receipts.

Any status may move to any other. The one transition with a side effect is
"newly accepted" (into ``accepted`` from anything else, including creation),
which makes the quote eligible for a receipt offer. A quote never holds
more than one receipt.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, replace

from atelier.application.services.entity_collections import (
    Collection,
    find,
    upsert_entity,
)
from atelier.application.services.ledger import build_transaction, record_transaction
from atelier.application.services.pricing_engine import quote_totals
from atelier.domain.coercion import now_ms, to_number, to_quantity
from atelier.domain.entities import (
    AppData,
    Quote,
    QuoteItem,
    QuoteStatus,
    Receipt,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from atelier.domain.exceptions import EntityNotFoundError, ReceiptAlreadyIssuedError

logger = logging.getLogger(__name__)

RECEIPT_PREFIX = "REC-"
_RECEIPT_SEQUENCE = re.compile(r"(\d+)\s*$")


@dataclass(frozen=True)
class QuoteDraft:
    """Operator input for a quote; ``id`` is None for a new quote."""

    client_id: str
    items: tuple[QuoteItem, ...]
    profit_margin_percent: float
    status: QuoteStatus = QuoteStatus.PENDING
    discount_value: float = 0.0
    discount_reason: str = ""
    id: str | None = None


@dataclass(frozen=True)
class QuoteSaveOutcome:
    data: AppData
    quote: Quote
    newly_accepted: bool
    receipt_offered: bool


@dataclass(frozen=True)
class ReceiptIssue:
    data: AppData
    receipt: Receipt
    transaction: Transaction


def is_newly_accepted(previous: QuoteStatus | None, current: QuoteStatus) -> bool:
    """True only for a move into ``accepted`` from a different (or no) state."""
    return current is QuoteStatus.ACCEPTED and previous is not QuoteStatus.ACCEPTED


def receipt_for_quote(data: AppData, quote_id: str) -> Receipt | None:
    return next((r for r in data.receipts if r.quote_id == quote_id), None)


def can_issue_receipt(data: AppData, quote_id: str) -> bool:
    """A receipt may be offered while the quote exists and has none yet."""
    return find(data.quotes, quote_id) is not None and receipt_for_quote(data, quote_id) is None


def next_receipt_number(receipts: Iterable[Receipt]) -> str:
    """``REC-`` plus one above the highest numeric suffix seen so far."""
    highest = 0
    for receipt in receipts:
        match = _RECEIPT_SEQUENCE.search(receipt.receipt_number or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{RECEIPT_PREFIX}{highest + 1:05d}"


def save_quote(data: AppData, draft: QuoteDraft, *, now: int | None = None) -> QuoteSaveOutcome:
    """Recompute totals from the draft and store the quote.

    Stored totals are never trusted: cost and price are derived from the
    current catalog on every save. An edited quote keeps its original
    ``created_at``.
    """
    previous = find(data.quotes, draft.id) if draft.id else None
    items = tuple(
        replace(item, quantity=to_quantity(item.quantity)) for item in draft.items
    )
    margin = to_number(draft.profit_margin_percent)
    discount = to_number(draft.discount_value)
    totals = quote_totals(items, data.products, data.materials, margin, discount)

    fields = dict(
        client_id=draft.client_id,
        items=items,
        profit_margin_percent=margin,
        status=draft.status,
        total_cost=totals.cost,
        total_price=totals.price,
        discount_value=discount,
        discount_reason=draft.discount_reason or "",
    )
    if previous is not None:
        quote = replace(previous, **fields)
    else:
        created_at = now if now is not None else now_ms()
        if draft.id:
            fields["id"] = draft.id
        quote = Quote(created_at=created_at, **fields)

    new_data = upsert_entity(data, Collection.QUOTES, quote)
    newly_accepted = is_newly_accepted(previous.status if previous else None, quote.status)
    offered = newly_accepted and receipt_for_quote(new_data, quote.id) is None

    logger.info(
        "Saved quote %s status=%s cost=%.2f price=%.2f%s",
        quote.id,
        quote.status.value,
        quote.total_cost,
        quote.total_price,
        " (receipt offered)" if offered else "",
    )
    return QuoteSaveOutcome(
        data=new_data,
        quote=quote,
        newly_accepted=newly_accepted,
        receipt_offered=offered,
    )


def _append_receipt(data: AppData, receipt: Receipt) -> ReceiptIssue:
    transaction = build_transaction(
        kind=TransactionType.INCOME,
        category=TransactionCategory.SALE,
        amount=receipt.total_price,
        description=f"Sale {receipt.receipt_number}",
        date=receipt.created_at,
    )
    new_data = upsert_entity(data, Collection.RECEIPTS, receipt)
    new_data = record_transaction(new_data, transaction)
    logger.info(
        "Issued receipt %s total=%.2f quote=%s",
        receipt.receipt_number,
        receipt.total_price,
        receipt.quote_id or "-",
    )
    return ReceiptIssue(data=new_data, receipt=receipt, transaction=transaction)


def issue_receipt(
    data: AppData, quote_id: str, payment_method: str, *, now: int | None = None
) -> ReceiptIssue:
    """Turn a quote into a sale: one receipt plus one income/sale transaction."""
    quote = find(data.quotes, quote_id)
    if quote is None:
        raise EntityNotFoundError("Quote", quote_id)
    existing = receipt_for_quote(data, quote_id)
    if existing is not None:
        raise ReceiptAlreadyIssuedError(quote_id, existing.receipt_number)

    receipt = Receipt(
        quote_id=quote.id,
        client_id=quote.client_id,
        items=quote.items,
        total_price=quote.total_price,
        discount_value=quote.discount_value,
        payment_method=payment_method,
        receipt_number=next_receipt_number(data.receipts),
        created_at=now if now is not None else now_ms(),
    )
    return _append_receipt(data, receipt)


def issue_standalone_receipt(
    data: AppData,
    *,
    client_id: str,
    items: Iterable[QuoteItem],
    payment_method: str,
    discount_value: float = 0.0,
    total_price: float | None = None,
    now: int | None = None,
) -> ReceiptIssue:
    """Record a sale that did not go through a quote.

    Without an explicit total the items are priced at the default margin.
    """
    items = tuple(replace(i, quantity=to_quantity(i.quantity)) for i in items)
    discount = to_number(discount_value)
    if total_price is None:
        total = quote_totals(
            items, data.products, data.materials, data.settings.default_margin, discount
        ).price
    else:
        total = to_number(total_price)

    receipt = Receipt(
        quote_id=None,
        client_id=client_id,
        items=items,
        total_price=total,
        discount_value=discount,
        payment_method=payment_method,
        receipt_number=next_receipt_number(data.receipts),
        created_at=now if now is not None else now_ms(),
    )
    return _append_receipt(data, receipt)
