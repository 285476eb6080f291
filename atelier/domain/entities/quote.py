"""Domain entity — a priced proposal addressed to a client."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

from atelier.domain.coercion import now_ms


class QuoteStatus(str, Enum):
    """Lifecycle states of a quote. Any state may move to any other."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: object) -> "QuoteStatus":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.PENDING


@dataclass(frozen=True)
class QuoteItem:
    product_id: str
    quantity: int = 1
    custom_price: float | None = None  # advisory only, never used for totals


@dataclass(frozen=True)
class Quote:
    """A quote with derived totals.

    ``total_cost`` and ``total_price`` are always recomputed from the items,
    margin and discount when the quote is saved.
    """

    client_id: str
    items: tuple[QuoteItem, ...] = ()
    profit_margin_percent: float = 0.0
    status: QuoteStatus = QuoteStatus.PENDING
    total_cost: float = 0.0
    total_price: float = 0.0
    discount_value: float = 0.0
    discount_reason: str = ""
    created_at: int = field(default_factory=now_ms)
    id: str = field(default_factory=lambda: str(uuid4()))
