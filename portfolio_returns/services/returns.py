"""Daily valuation loop producing portfolio values and simple returns."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, getcontext
from typing import Iterable

from .dates import generate_date_range, to_utc_date
from .holdings import (
    HoldingsState,
    TransactionInput,
    apply_transaction,
    group_by_effective_date,
    held_positions,
    net_quantity_before,
    order_for_replay,
)
from .price_index import PriceIndex, PriceObservation, build_price_index, last_price_at_or_before

getcontext().prec = 28

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class ReturnPoint:
    date: date
    portfolio_value: Decimal
    daily_return: Decimal


def compute_daily_return(previous_value: Decimal | None, current_value: Decimal) -> Decimal:
    """Simple return versus the previous day, 0 on the first day or after a zero value."""

    if previous_value is None or previous_value == 0:
        return ZERO
    return (current_value - previous_value) / previous_value


def value_holdings(state: HoldingsState, index: PriceIndex, day: date) -> Decimal:
    total = ZERO
    for trading_item_id, quantity in held_positions(state):
        price = last_price_at_or_before(index, trading_item_id, day)
        if price is None:
            continue
        total += quantity * price
    return total


def compute_returns(
    transactions: Iterable[TransactionInput],
    observations: Iterable[PriceObservation],
    window_start: datetime | date,
    window_end: datetime | date,
) -> list[ReturnPoint]:
    """Value the portfolio for every day in the window.

    Holdings are seeded from transactions dated before the window, then each
    in-window day applies that day's transactions before valuing positions at
    the most recent close on or before the day. Transactions dated after the
    window are ignored.
    """

    start = to_utc_date(window_start)
    end = to_utc_date(window_end)
    if end < start:
        raise ValueError(f"Window end {end.isoformat()} precedes start {start.isoformat()}")

    ordered = order_for_replay(transactions)
    index = build_price_index(observations)
    state = net_quantity_before(ordered, start)
    in_window = group_by_effective_date(tx for tx in ordered if start <= tx.effective_date <= end)

    points: list[ReturnPoint] = []
    previous: Decimal | None = None
    for day in generate_date_range(start, end):
        for tx in in_window.get(day, ()):
            apply_transaction(state, tx)
        value = value_holdings(state, index, day)
        points.append(ReturnPoint(date=day, portfolio_value=value, daily_return=compute_daily_return(previous, value)))
        previous = value

    logger.debug(
        "Computed %d return points from %s to %s over %d instruments",
        len(points),
        start.isoformat(),
        end.isoformat(),
        len(index),
    )
    return points


def window_for(days: int, today: date) -> tuple[date, date]:
    """The ``days``-long window ending on ``today`` inclusive."""

    if days < 1:
        raise ValueError("days must be at least 1")
    return today - timedelta(days=days - 1), today


def price_fetch_range(window_start: date, window_end: date, lookback_days: int) -> tuple[date, date]:
    return window_start - timedelta(days=lookback_days), window_end


__all__ = [
    "ReturnPoint",
    "compute_daily_return",
    "value_holdings",
    "compute_returns",
    "window_for",
    "price_fetch_range",
]
