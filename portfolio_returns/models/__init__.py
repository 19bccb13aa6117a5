"""Database model exports."""

from .market import Company, HistoricalPrice, TradingItem
from .portfolio import Portfolio, Transaction, TRANSACTION_TYPES

__all__ = [
    "Company",
    "TradingItem",
    "HistoricalPrice",
    "Portfolio",
    "Transaction",
    "TRANSACTION_TYPES",
]
