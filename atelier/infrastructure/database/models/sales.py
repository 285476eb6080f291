"""SQLAlchemy ORM models for quotes, receipts and their line items."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from atelier.infrastructure.database.base import Base


class QuoteModel(Base):
    """ORM model — maps to the 'quotes' table."""

    __tablename__ = "quotes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    client_id: Mapped[str] = mapped_column(String(36), nullable=False, default="")
    profit_margin_percent: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    discount_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    discount_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (Index("ix_quotes_client", "client_id"),)

    def __repr__(self) -> str:
        return f"<QuoteModel(id={self.id}, status='{self.status}')>"


class QuoteItemModel(Base):
    """ORM model — one line of a quote."""

    __tablename__ = "quote_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    quote_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[str] = mapped_column(String(36), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    custom_price: Mapped[float | None] = mapped_column(Float, nullable=True)

    __table_args__ = (Index("ix_quote_items_quote", "quote_id"),)


class ReceiptModel(Base):
    """ORM model — maps to the 'receipts' table."""

    __tablename__ = "receipts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    quote_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    client_id: Mapped[str] = mapped_column(String(36), nullable=False, default="")
    total_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    discount_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    payment_method: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    receipt_number: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (Index("ix_receipts_quote", "quote_id"),)

    def __repr__(self) -> str:
        return f"<ReceiptModel(id={self.id}, number='{self.receipt_number}')>"


class ReceiptItemModel(Base):
    """ORM model — one line of a receipt."""

    __tablename__ = "receipt_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    receipt_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("receipts.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[str] = mapped_column(String(36), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    custom_price: Mapped[float | None] = mapped_column(Float, nullable=True)

    __table_args__ = (Index("ix_receipt_items_receipt", "receipt_id"),)
