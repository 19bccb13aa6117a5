"""Parsing of ``EXCHANGE:TICKER`` style instrument symbols."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .exceptions import InvalidTickerError

_TICKER_PATTERN = re.compile(r"^([A-Z]+)[:\s.]([A-Z0-9]+)$", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedTicker:
    exchange_symbol: str
    ticker_symbol: str

    def __str__(self) -> str:
        return f"{self.exchange_symbol}:{self.ticker_symbol}"


def parse_ticker(value: str) -> ParsedTicker:
    """Split ``ASX:BHP``, ``ASX BHP`` or ``asx.bhp`` into upper-cased parts."""

    match = _TICKER_PATTERN.match(value.strip())
    if match is None:
        raise InvalidTickerError(
            f"Invalid ticker format: {value}. Expected format: EXCHANGE:TICKER (e.g., ASX:BHP)"
        )
    exchange, ticker = match.groups()
    return ParsedTicker(exchange_symbol=exchange.upper(), ticker_symbol=ticker.upper())


__all__ = ["ParsedTicker", "parse_ticker"]
