"""Domain entity — an append-only ledger entry."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

from atelier.domain.coercion import now_ms


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def parse(cls, value: object) -> "TransactionType":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.EXPENSE


class TransactionCategory(str, Enum):
    """Fixed ledger taxonomy."""

    SALE = "sale"
    RAW_MATERIAL = "raw-material"
    MAINTENANCE = "maintenance"
    UTILITIES = "utilities"
    RENT = "rent"
    OTHER = "other"
    INITIAL_CAPITAL = "initial-capital"

    @classmethod
    def parse(cls, value: object) -> "TransactionCategory":
        """Parse a category code, translating legacy codes; unknown → OTHER."""
        raw = str(value).strip().lower()
        if raw in _LEGACY_CODES:
            return _LEGACY_CODES[raw]
        try:
            return cls(raw)
        except ValueError:
            return cls.OTHER

    @property
    def is_income(self) -> bool:
        return self in INCOME_CATEGORIES


INCOME_CATEGORIES = frozenset({TransactionCategory.SALE, TransactionCategory.INITIAL_CAPITAL})

# Codes written by earlier versions of the data set
_LEGACY_CODES = {
    "venta": TransactionCategory.SALE,
    "materia_prima": TransactionCategory.RAW_MATERIAL,
    "mantenimiento": TransactionCategory.MAINTENANCE,
    "servicios": TransactionCategory.UTILITIES,
    "alquiler": TransactionCategory.RENT,
    "otros": TransactionCategory.OTHER,
    "capital_inicial": TransactionCategory.INITIAL_CAPITAL,
}


@dataclass(frozen=True)
class Transaction:
    type: TransactionType
    category: TransactionCategory
    amount: float
    description: str = ""
    date: int = field(default_factory=now_ms)
    id: str = field(default_factory=lambda: str(uuid4()))
