"""SQLAlchemy ORM model for ledger transactions."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from atelier.infrastructure.database.base import Base


class TransactionModel(Base):
    """ORM model — maps to the 'transactions' table."""

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (Index("ix_transactions_date", "date"),)

    def __repr__(self) -> str:
        return f"<TransactionModel(id={self.id}, type='{self.type}', amount={self.amount})>"
