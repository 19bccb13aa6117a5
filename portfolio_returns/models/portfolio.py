"""Portfolio and transaction models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio_returns.db.base import Base

TRANSACTION_TYPES = ("buy", "sell")


def _new_id() -> str:
    return str(uuid.uuid4())


class Portfolio(Base):
    __tablename__ = "portfolio"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    transactions: Mapped[list["Transaction"]] = relationship(
        back_populates="portfolio", cascade="all, delete-orphan"
    )


class Transaction(Base):
    __tablename__ = "portfolio_transaction"
    __table_args__ = (
        Index("ix_transaction_portfolio_date", "portfolio_id", "transaction_date"),
        Index("ix_transaction_trading_item", "trading_item_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    portfolio_id: Mapped[str] = mapped_column(ForeignKey("portfolio.id", ondelete="CASCADE"))
    trading_item_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("trading_item.id"))
    transaction_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    transaction_type: Mapped[str] = mapped_column(Enum(*TRANSACTION_TYPES, name="transaction_type"))
    quantity: Mapped[float] = mapped_column(Numeric(18, 6))
    price: Mapped[float] = mapped_column(Numeric(18, 6))
    currency: Mapped[str] = mapped_column(String(3), default="AUD")
    transaction_cost: Mapped[float] = mapped_column(Numeric(18, 6), default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    portfolio: Mapped[Portfolio] = relationship(back_populates="transactions")


__all__ = ["Portfolio", "Transaction", "TRANSACTION_TYPES"]
