"""Storage access used by the application services.

The services depend on the protocols; the SQLAlchemy classes below are the
implementations wired in by the API. Tests substitute in-memory fakes.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Protocol

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import HistoricalPrice, Portfolio, TradingItem, Transaction
from .dates import as_utc
from .holdings import TransactionInput
from .price_index import PriceObservation

logger = logging.getLogger(__name__)


class PortfolioRepository(Protocol):
    async def get(self, portfolio_id: str) -> Portfolio | None: ...

    async def create(self, name: str) -> Portfolio: ...


class TransactionRepository(Protocol):
    async def get(self, transaction_id: str) -> Transaction | None: ...

    async def list_for_portfolio(self, portfolio_id: str) -> list[TransactionInput]: ...

    async def holdings_at(self, portfolio_id: str, at: datetime) -> dict[int, Decimal]: ...

    async def bulk_create(self, records: list[dict[str, Any]]) -> list[Transaction]: ...

    async def update(self, transaction: Transaction, changes: dict[str, Any]) -> Transaction: ...

    async def delete(self, transaction: Transaction) -> None: ...


class HistoricalPriceRepository(Protocol):
    async def list_in_range(
        self, trading_item_ids: Iterable[int], start: date, end: date
    ) -> list[PriceObservation]: ...


class TradingItemRepository(Protocol):
    async def find_by_exchange_and_ticker(self, exchange_symbol: str, ticker_symbol: str) -> TradingItem | None: ...


def to_transaction_input(tx: Transaction) -> TransactionInput:
    return TransactionInput(
        id=tx.id,
        portfolio_id=tx.portfolio_id,
        trading_item_id=tx.trading_item_id,
        transaction_date=tx.transaction_date,
        transaction_type=tx.transaction_type,
        quantity=Decimal(str(tx.quantity)),
        price=Decimal(str(tx.price)),
        currency=tx.currency,
        transaction_cost=Decimal(str(tx.transaction_cost or 0)),
    )


class SqlPortfolioRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, portfolio_id: str) -> Portfolio | None:
        return await self._session.get(Portfolio, portfolio_id)

    async def create(self, name: str) -> Portfolio:
        portfolio = Portfolio(name=name)
        self._session.add(portfolio)
        await self._session.commit()
        await self._session.refresh(portfolio)
        return portfolio


class SqlTransactionRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, transaction_id: str) -> Transaction | None:
        return await self._session.get(Transaction, transaction_id)

    async def list_for_portfolio(self, portfolio_id: str) -> list[TransactionInput]:
        result = await self._session.execute(
            select(Transaction)
            .where(Transaction.portfolio_id == portfolio_id)
            .order_by(Transaction.transaction_date, Transaction.created_at)
        )
        return [to_transaction_input(tx) for tx in result.scalars().all()]

    async def holdings_at(self, portfolio_id: str, at: datetime) -> dict[int, Decimal]:
        """Net quantity per trading item over transactions dated on or before ``at``."""

        signed = case(
            (Transaction.transaction_type == "buy", Transaction.quantity),
            else_=-Transaction.quantity,
        )
        result = await self._session.execute(
            select(Transaction.trading_item_id, func.sum(signed))
            .where(Transaction.portfolio_id == portfolio_id, Transaction.transaction_date <= as_utc(at))
            .group_by(Transaction.trading_item_id)
        )
        return {trading_item_id: Decimal(str(total or 0)) for trading_item_id, total in result.all()}

    async def bulk_create(self, records: list[dict[str, Any]]) -> list[Transaction]:
        transactions = [Transaction(**record) for record in records]
        self._session.add_all(transactions)
        await self._session.commit()
        return transactions

    async def update(self, transaction: Transaction, changes: dict[str, Any]) -> Transaction:
        for field, value in changes.items():
            setattr(transaction, field, value)
        await self._session.commit()
        await self._session.refresh(transaction)
        return transaction

    async def delete(self, transaction: Transaction) -> None:
        await self._session.delete(transaction)
        await self._session.commit()


class SqlHistoricalPriceRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def list_in_range(self, trading_item_ids: Iterable[int], start: date, end: date) -> list[PriceObservation]:
        ids = sorted(set(trading_item_ids))
        if not ids:
            return []
        result = await self._session.execute(
            select(
                HistoricalPrice.trading_item_id,
                HistoricalPrice.pricing_date,
                HistoricalPrice.price_close_aud,
                HistoricalPrice.price_close_usd,
            )
            .where(
                HistoricalPrice.trading_item_id.in_(ids),
                HistoricalPrice.pricing_date >= start,
                HistoricalPrice.pricing_date <= end,
            )
            .order_by(HistoricalPrice.trading_item_id, HistoricalPrice.pricing_date, HistoricalPrice.id)
        )
        observations = [
            PriceObservation(
                trading_item_id=trading_item_id,
                pricing_date=pricing_date,
                price_close=Decimal(str(price_close)),
                price_close_usd=Decimal(str(price_close_usd)) if price_close_usd is not None else None,
            )
            for trading_item_id, pricing_date, price_close, price_close_usd in result.all()
        ]
        logger.debug("Loaded %d price observations for %d trading items", len(observations), len(ids))
        return observations


class SqlTradingItemRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_exchange_and_ticker(self, exchange_symbol: str, ticker_symbol: str) -> TradingItem | None:
        result = await self._session.execute(
            select(TradingItem).where(
                TradingItem.exchange_symbol == exchange_symbol,
                TradingItem.ticker_symbol == ticker_symbol,
            )
        )
        return result.scalars().first()


__all__ = [
    "PortfolioRepository",
    "TransactionRepository",
    "HistoricalPriceRepository",
    "TradingItemRepository",
    "to_transaction_input",
    "SqlPortfolioRepository",
    "SqlTransactionRepository",
    "SqlHistoricalPriceRepository",
    "SqlTradingItemRepository",
]
