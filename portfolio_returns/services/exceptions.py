"""Domain errors raised by the application services."""

from __future__ import annotations

from typing import Any


class PortfolioNotFoundError(LookupError):
    def __init__(self, portfolio_id: str):
        super().__init__(f"Portfolio not found: {portfolio_id}")
        self.portfolio_id = portfolio_id


class TransactionNotFoundError(LookupError):
    def __init__(self, transaction_id: str):
        super().__init__(f"Transaction not found: {transaction_id}")
        self.transaction_id = transaction_id


class InvalidTickerError(ValueError):
    """Raised when a ticker string is not in ``EXCHANGE:TICKER`` form."""


class InvalidRequestError(ValueError):
    """Request data failed validation outside of the pydantic schemas."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


__all__ = [
    "PortfolioNotFoundError",
    "TransactionNotFoundError",
    "InvalidTickerError",
    "InvalidRequestError",
]
