"""Pydantic DTOs for ledger entries and the monthly summary."""

from pydantic import Field

from atelier.application.schemas._types import Number, OptionalText, Text, Timestamp
from atelier.application.schemas.snapshot import (
    CamelModel,
    Category,
    Kind,
    TransactionDocument,
)
from atelier.domain.entities import TransactionCategory


class TransactionRequest(CamelModel):
    """A manual ledger entry; ``date`` defaults to now."""

    id: OptionalText = None
    type: Kind
    category: Category = TransactionCategory.OTHER
    amount: Number = 0.0
    description: Text = ""
    date: Timestamp = Field(default=None, validate_default=True)


class TransactionImportRequest(CamelModel):
    """Replace the whole ledger. Ignored unless ``confirmed`` is true."""

    transactions: list[TransactionDocument] = Field(default_factory=list)
    confirmed: bool = False


class TransactionImportResponse(CamelModel):
    applied: bool
    count: int


class LedgerSummaryResponse(CamelModel):
    year: int
    month: int
    balance: float
    monthly_income: float
    monthly_expense: float
    monthly_profit: float
