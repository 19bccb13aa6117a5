"""Per-instrument price series with carry-forward lookup.

Observations arrive as a flat, possibly unordered list. They are grouped by
trading item into date-sorted arrays so that "last close on or before day D"
is a binary search instead of a scan or a storage round-trip. Days without an
observation (weekends, exchange holidays) therefore reuse the previous close.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping

from .dates import to_utc_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceObservation:
    """A single daily close for one trading item."""

    trading_item_id: int
    pricing_date: date
    price_close: Decimal
    price_close_usd: Decimal | None = None


@dataclass
class PriceSeries:
    """Ascending, duplicate-free (date, close) pairs for one trading item."""

    dates: list[date] = field(default_factory=list)
    prices: list[Decimal] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.dates)

    def price_at_or_before(self, day: date) -> Decimal | None:
        # Rightmost entry with date <= day.
        position = bisect_right(self.dates, day)
        if position == 0:
            return None
        return self.prices[position - 1]


PriceIndex = Mapping[int, PriceSeries]


def build_price_index(observations: Iterable[PriceObservation]) -> dict[int, PriceSeries]:
    """Group observations by trading item into sorted series.

    When the same (trading item, day) appears more than once the first
    observation seen wins.
    """

    grouped: dict[int, dict[date, Decimal]] = {}
    total = 0
    duplicates = 0
    for observation in observations:
        total += 1
        day = to_utc_date(observation.pricing_date)
        by_day = grouped.setdefault(observation.trading_item_id, {})
        if day in by_day:
            duplicates += 1
            continue
        by_day[day] = Decimal(str(observation.price_close))

    index: dict[int, PriceSeries] = {}
    for trading_item_id, by_day in grouped.items():
        ordered = sorted(by_day.items())
        index[trading_item_id] = PriceSeries(
            dates=[day for day, _ in ordered],
            prices=[price for _, price in ordered],
        )

    if duplicates:
        logger.debug("Ignored %d duplicate price observations out of %d", duplicates, total)
    return index


def last_price_at_or_before(index: PriceIndex, trading_item_id: int, day: date) -> Decimal | None:
    series = index.get(trading_item_id)
    if series is None:
        return None
    return series.price_at_or_before(day)


__all__ = [
    "PriceObservation",
    "PriceSeries",
    "PriceIndex",
    "build_price_index",
    "last_price_at_or_before",
]
