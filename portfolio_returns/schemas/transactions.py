"""Pydantic schemas for transaction upload and maintenance."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from .common import CamelModel

MAX_BULK_TRANSACTIONS = 1000

TransactionType = Literal["buy", "sell"]


class BulkTransactionItem(CamelModel):
    ticker_symbol: str = Field(..., min_length=1, examples=["ASX:BHP"])
    transaction_date: datetime
    transaction_type: TransactionType
    quantity: float = Field(..., gt=0)
    price: float = Field(..., gt=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    transaction_cost: float = Field(default=0.0, ge=0)


class BulkUploadTransactionsRequest(CamelModel):
    transactions: list[BulkTransactionItem] = Field(..., min_length=1, max_length=MAX_BULK_TRANSACTIONS)


class AcceptedTransactionSchema(CamelModel):
    transaction_id: str
    ticker_symbol: str
    transaction_type: str
    transaction_date: datetime
    warnings: list[str] | None = None


class RejectedTransactionSchema(CamelModel):
    transaction: BulkTransactionItem
    reason: str


class BulkUploadResponse(CamelModel):
    accepted_transactions: list[AcceptedTransactionSchema]
    rejected_transactions: list[RejectedTransactionSchema]


class TransactionUpdateRequest(CamelModel):
    transaction_date: datetime | None = None
    transaction_type: TransactionType | None = None
    quantity: float | None = Field(default=None, gt=0)
    price: float | None = Field(default=None, gt=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    transaction_cost: float | None = Field(default=None, ge=0)


class TransactionSchema(CamelModel):
    id: str
    portfolio_id: str
    trading_item_id: int
    transaction_date: datetime
    transaction_type: str
    quantity: float
    price: float
    currency: str
    transaction_cost: float


class TransactionUpdateResponse(CamelModel):
    transaction: TransactionSchema
    warnings: list[str] | None = None


__all__ = [
    "MAX_BULK_TRANSACTIONS",
    "BulkTransactionItem",
    "BulkUploadTransactionsRequest",
    "AcceptedTransactionSchema",
    "RejectedTransactionSchema",
    "BulkUploadResponse",
    "TransactionUpdateRequest",
    "TransactionSchema",
    "TransactionUpdateResponse",
]
