"""Transaction upload, update and delete endpoints."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, status

from ...config import AppSettings
from ...models import Transaction
from ...schemas import (
    AcceptedTransactionSchema,
    BulkUploadResponse,
    BulkUploadTransactionsRequest,
    MessageSchema,
    RejectedTransactionSchema,
    TransactionSchema,
    TransactionUpdateRequest,
    TransactionUpdateResponse,
)
from ...services import transactions as transaction_service
from ...services.repositories import (
    SqlPortfolioRepository,
    SqlTradingItemRepository,
    SqlTransactionRepository,
)
from ..dependencies import (
    get_app_settings,
    get_portfolio_repository,
    get_trading_item_repository,
    get_transaction_repository,
)

router = APIRouter()


def _serialize_transaction(tx: Transaction) -> TransactionSchema:
    return TransactionSchema(
        id=tx.id,
        portfolio_id=tx.portfolio_id,
        trading_item_id=tx.trading_item_id,
        transaction_date=tx.transaction_date,
        transaction_type=tx.transaction_type,
        quantity=float(Decimal(str(tx.quantity))),
        price=float(Decimal(str(tx.price))),
        currency=tx.currency,
        transaction_cost=float(Decimal(str(tx.transaction_cost))),
    )


@router.post(
    "/{portfolio_id}/transactions",
    response_model=BulkUploadResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_207_MULTI_STATUS,
)
async def post_transactions(
    portfolio_id: str,
    payload: BulkUploadTransactionsRequest,
    settings: AppSettings = Depends(get_app_settings),
    portfolios: SqlPortfolioRepository = Depends(get_portfolio_repository),
    transactions: SqlTransactionRepository = Depends(get_transaction_repository),
    trading_items: SqlTradingItemRepository = Depends(get_trading_item_repository),
) -> BulkUploadResponse:
    result = await transaction_service.bulk_upload_transactions(
        portfolio_id,
        payload.transactions,
        portfolios=portfolios,
        transactions=transactions,
        trading_items=trading_items,
        default_currency=settings.default_currency,
    )
    return BulkUploadResponse(
        accepted_transactions=[
            AcceptedTransactionSchema(
                transaction_id=item.transaction_id,
                ticker_symbol=item.ticker_symbol,
                transaction_type=item.transaction_type,
                transaction_date=item.transaction_date,
                warnings=item.warnings or None,
            )
            for item in result.accepted
        ],
        rejected_transactions=[
            RejectedTransactionSchema(transaction=item.transaction, reason=item.reason) for item in result.rejected
        ],
    )


@router.put(
    "/{portfolio_id}/transactions/{transaction_id}",
    response_model=TransactionUpdateResponse,
    response_model_exclude_none=True,
)
async def put_transaction(
    portfolio_id: str,
    transaction_id: str,
    payload: TransactionUpdateRequest,
    portfolios: SqlPortfolioRepository = Depends(get_portfolio_repository),
    transactions: SqlTransactionRepository = Depends(get_transaction_repository),
) -> TransactionUpdateResponse:
    result = await transaction_service.update_transaction(
        portfolio_id,
        transaction_id,
        payload.model_dump(exclude_unset=True),
        portfolios=portfolios,
        transactions=transactions,
    )
    return TransactionUpdateResponse(
        transaction=_serialize_transaction(result.transaction),
        warnings=result.warnings or None,
    )


@router.delete("/{portfolio_id}/transactions/{transaction_id}", response_model=MessageSchema)
async def delete_transaction(
    portfolio_id: str,
    transaction_id: str,
    portfolios: SqlPortfolioRepository = Depends(get_portfolio_repository),
    transactions: SqlTransactionRepository = Depends(get_transaction_repository),
) -> MessageSchema:
    await transaction_service.delete_transaction(
        portfolio_id,
        transaction_id,
        portfolios=portfolios,
        transactions=transactions,
    )
    return MessageSchema(message="Transaction deleted successfully")
