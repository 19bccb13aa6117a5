import pytest

from portfolio_returns.services.exceptions import InvalidTickerError
from portfolio_returns.services.tickers import ParsedTicker, parse_ticker


@pytest.mark.parametrize("raw", ["ASX:BHP", "ASX BHP", "ASX.BHP", "asx:bhp", "  ASX:BHP  "])
def test_parse_ticker_accepts_supported_separators(raw: str) -> None:
    assert parse_ticker(raw) == ParsedTicker(exchange_symbol="ASX", ticker_symbol="BHP")


def test_parse_ticker_allows_digits_in_ticker() -> None:
    parsed = parse_ticker("asx:a2m")

    assert parsed.ticker_symbol == "A2M"
    assert str(parsed) == "ASX:A2M"


@pytest.mark.parametrize("raw", ["BHP", "ASX-BHP", "ASX:", ":BHP", "AS1:BHP", "ASX:BHP:X"])
def test_parse_ticker_rejects_malformed_input(raw: str) -> None:
    with pytest.raises(InvalidTickerError, match="Invalid ticker format"):
        parse_ticker(raw)
