"""Valuation core and application services."""

from .exceptions import (
    InvalidRequestError,
    InvalidTickerError,
    PortfolioNotFoundError,
    TransactionNotFoundError,
)
from .holdings import TransactionInput
from .price_index import PriceObservation, build_price_index
from .returns import ReturnPoint, compute_returns

__all__ = [
    "InvalidRequestError",
    "InvalidTickerError",
    "PortfolioNotFoundError",
    "TransactionNotFoundError",
    "TransactionInput",
    "PriceObservation",
    "build_price_index",
    "ReturnPoint",
    "compute_returns",
]
