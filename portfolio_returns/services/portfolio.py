"""Portfolio creation and the daily returns query."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from opentelemetry import trace

from ..config.settings import DEFAULT_LOOKBACK_DAYS
from ..models import Portfolio
from .dates import utc_today
from .exceptions import InvalidRequestError, PortfolioNotFoundError
from .holdings import instruments_of
from .repositories import HistoricalPriceRepository, PortfolioRepository, TransactionRepository
from .returns import ReturnPoint, compute_returns, price_fetch_range, window_for

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class PortfolioReturns:
    portfolio_id: str
    points: list[ReturnPoint] = field(default_factory=list)


async def create_portfolio(name: str, *, portfolios: PortfolioRepository) -> Portfolio:
    normalized = name.strip()
    if not normalized:
        raise InvalidRequestError("Portfolio name must not be empty")
    portfolio = await portfolios.create(normalized)
    logger.info("Created portfolio %s (%s)", portfolio.id, portfolio.name)
    return portfolio


async def get_portfolio_returns(
    portfolio_id: str,
    days: int,
    *,
    portfolios: PortfolioRepository,
    transactions: TransactionRepository,
    prices: HistoricalPriceRepository,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    today: date | None = None,
) -> PortfolioReturns:
    """Daily values and returns for the ``days`` most recent UTC days, today included."""

    if lookback_days < 0:
        raise ValueError("lookback_days must not be negative")

    with tracer.start_as_current_span("portfolio.compute_returns") as span:
        span.set_attribute("portfolio.id", portfolio_id)
        span.set_attribute("portfolio.window_days", days)

        portfolio = await portfolios.get(portfolio_id)
        if portfolio is None:
            raise PortfolioNotFoundError(portfolio_id)

        window_start, window_end = window_for(days, today or utc_today())
        history = await transactions.list_for_portfolio(portfolio_id)
        instruments = instruments_of(history)

        observations = []
        if instruments:
            fetch_start, fetch_end = price_fetch_range(window_start, window_end, lookback_days)
            observations = await prices.list_in_range(instruments, fetch_start, fetch_end)

        span.set_attribute("portfolio.transaction_count", len(history))
        span.set_attribute("portfolio.instrument_count", len(instruments))
        logger.debug(
            "Valuing portfolio %s: %d transactions, %d instruments, %d price observations",
            portfolio_id,
            len(history),
            len(instruments),
            len(observations),
        )
        points = compute_returns(history, observations, window_start, window_end)

    return PortfolioReturns(portfolio_id=portfolio_id, points=points)


__all__ = ["PortfolioReturns", "create_portfolio", "get_portfolio_returns"]
