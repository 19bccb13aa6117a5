"""Shared FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import AppSettings
from ..db import Database
from ..services.repositories import (
    SqlHistoricalPriceRepository,
    SqlPortfolioRepository,
    SqlTradingItemRepository,
    SqlTransactionRepository,
)


def get_app_settings(request: Request) -> AppSettings:
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


def get_portfolio_repository(session: AsyncSession = Depends(get_db_session)) -> SqlPortfolioRepository:
    return SqlPortfolioRepository(session)


def get_transaction_repository(session: AsyncSession = Depends(get_db_session)) -> SqlTransactionRepository:
    return SqlTransactionRepository(session)


def get_price_repository(session: AsyncSession = Depends(get_db_session)) -> SqlHistoricalPriceRepository:
    return SqlHistoricalPriceRepository(session)


def get_trading_item_repository(session: AsyncSession = Depends(get_db_session)) -> SqlTradingItemRepository:
    return SqlTradingItemRepository(session)


__all__ = [
    "get_app_settings",
    "get_db_session",
    "get_portfolio_repository",
    "get_transaction_repository",
    "get_price_repository",
    "get_trading_item_repository",
]
