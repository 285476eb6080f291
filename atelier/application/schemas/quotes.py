"""Pydantic DTOs for quotes, receipts and quote price previews."""

from pydantic import Field

from atelier.application.schemas._types import Number, OptionalNumber, OptionalText, Text
from atelier.application.schemas.snapshot import (
    CamelModel,
    QuoteDocument,
    QuoteItems,
    ReceiptDocument,
    Status,
    TransactionDocument,
)
from atelier.application.services.pricing_engine import QuotePreview
from atelier.application.services.quote_lifecycle import QuoteDraft, QuoteSaveOutcome, ReceiptIssue
from atelier.domain.entities import QuoteStatus


class QuoteDraftRequest(CamelModel):
    """Quote editor payload. Totals are never accepted from the client."""

    id: OptionalText = None
    client_id: str = Field(..., min_length=1)
    items: QuoteItems = Field(default_factory=list)
    profit_margin_percent: OptionalNumber = Field(None, ge=0)
    status: Status = QuoteStatus.PENDING
    discount_value: Number = 0.0
    discount_reason: Text = ""

    def to_draft(self, default_margin: float) -> QuoteDraft:
        margin = self.profit_margin_percent
        return QuoteDraft(
            id=self.id,
            client_id=self.client_id,
            items=tuple(i.to_entity() for i in self.items),
            profit_margin_percent=default_margin if margin is None else margin,
            status=self.status,
            discount_value=self.discount_value,
            discount_reason=self.discount_reason,
        )


class QuoteSaveResponse(CamelModel):
    quote: QuoteDocument
    newly_accepted: bool
    receipt_offered: bool

    @classmethod
    def from_outcome(cls, outcome: QuoteSaveOutcome) -> "QuoteSaveResponse":
        return cls(
            quote=QuoteDocument.from_entity(outcome.quote),
            newly_accepted=outcome.newly_accepted,
            receipt_offered=outcome.receipt_offered,
        )


class ReceiptRequest(CamelModel):
    payment_method: str = Field(..., min_length=1, examples=["cash"])


class StandaloneReceiptRequest(CamelModel):
    """A sale recorded without a quote."""

    client_id: str = Field(..., min_length=1)
    items: QuoteItems = Field(default_factory=list)
    payment_method: str = Field(..., min_length=1, examples=["transfer"])
    discount_value: Number = 0.0
    total_price: OptionalNumber = None


class ReceiptIssueResponse(CamelModel):
    receipt: ReceiptDocument
    transaction: TransactionDocument

    @classmethod
    def from_issue(cls, issue: ReceiptIssue) -> "ReceiptIssueResponse":
        return cls(
            receipt=ReceiptDocument.from_entity(issue.receipt),
            transaction=TransactionDocument.from_entity(issue.transaction),
        )


class QuotePreviewRequest(CamelModel):
    items: QuoteItems = Field(default_factory=list)
    profit_margin_percent: OptionalNumber = Field(None, ge=0)
    discount_value: Number = 0.0


class LinePriceResponse(CamelModel):
    product_id: str
    quantity: int
    unit_price: float
    line_total: float


class QuotePreviewResponse(CamelModel):
    total_cost: float
    total_price: float
    lines: list[LinePriceResponse]

    @classmethod
    def from_preview(cls, preview: QuotePreview) -> "QuotePreviewResponse":
        return cls(
            total_cost=preview.cost,
            total_price=preview.price,
            lines=[
                LinePriceResponse(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                )
                for line in preview.lines
            ],
        )


class CatalogPriceResponse(CamelModel):
    product_id: str
    name: str
    cost: float
    price: float
