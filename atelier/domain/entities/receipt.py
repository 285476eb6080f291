"""Domain entity — the immutable record of a completed sale."""

from dataclasses import dataclass, field
from uuid import uuid4

from atelier.domain.coercion import now_ms
from atelier.domain.entities.quote import QuoteItem


@dataclass(frozen=True)
class Receipt:
    """A sale receipt, optionally linked to the quote it was issued from.

    A quote is linked to at most one receipt.
    """

    client_id: str
    items: tuple[QuoteItem, ...]
    total_price: float
    receipt_number: str
    payment_method: str = ""
    discount_value: float = 0.0
    quote_id: str | None = None
    created_at: int = field(default_factory=now_ms)
    id: str = field(default_factory=lambda: str(uuid4()))
