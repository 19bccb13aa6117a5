"""Listed companies, their trading items and daily closing prices."""

from __future__ import annotations

from datetime import date

from sqlalchemy import BigInteger, Date, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_returns.db.base import Base


class Company(Base):
    __tablename__ = "company"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    primary_industry_id: Mapped[int | None] = mapped_column(Integer, nullable=True)


class TradingItem(Base):
    __tablename__ = "trading_item"
    __table_args__ = (
        UniqueConstraint("exchange_symbol", "ticker_symbol", name="uq_trading_item_exchange_ticker"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    company_id: Mapped[str] = mapped_column(ForeignKey("company.id"))
    exchange_symbol: Mapped[str] = mapped_column(String(16))
    ticker_symbol: Mapped[str] = mapped_column(String(32))
    exchange_country_iso: Mapped[str] = mapped_column(String(2))


class HistoricalPrice(Base):
    __tablename__ = "historical_price"
    __table_args__ = (
        UniqueConstraint("trading_item_id", "pricing_date", name="uq_historical_price_item_date"),
        Index("ix_historical_price_item_date", "trading_item_id", "pricing_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trading_item_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("trading_item.id"))
    pricing_date: Mapped[date] = mapped_column(Date)
    price_close_aud: Mapped[float] = mapped_column(Numeric(18, 6))
    price_close_usd: Mapped[float] = mapped_column(Numeric(18, 6))
    shares_outstanding: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    market_cap: Mapped[float | None] = mapped_column(Numeric(24, 4), nullable=True)


__all__ = ["Company", "TradingItem", "HistoricalPrice"]
