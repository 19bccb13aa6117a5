"""Pydantic request and response models."""

from .common import CamelModel, MessageSchema
from .portfolio import PortfolioCreateRequest, PortfolioReturnsSchema, PortfolioSchema, ReturnPointSchema
from .transactions import (
    MAX_BULK_TRANSACTIONS,
    AcceptedTransactionSchema,
    BulkTransactionItem,
    BulkUploadResponse,
    BulkUploadTransactionsRequest,
    RejectedTransactionSchema,
    TransactionSchema,
    TransactionUpdateRequest,
    TransactionUpdateResponse,
)

__all__ = [
    "CamelModel",
    "MessageSchema",
    "PortfolioCreateRequest",
    "PortfolioSchema",
    "ReturnPointSchema",
    "PortfolioReturnsSchema",
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
