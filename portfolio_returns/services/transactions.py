"""Bulk upload and maintenance of portfolio transactions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from ..config.settings import DEFAULT_CURRENCY
from ..models import Transaction
from ..schemas import BulkTransactionItem
from .dates import as_utc
from .exceptions import InvalidTickerError, PortfolioNotFoundError, TransactionNotFoundError
from .holdings import SELL, TransactionInput, apply_transaction
from .repositories import PortfolioRepository, TradingItemRepository, TransactionRepository
from .tickers import parse_ticker

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "transaction_date",
    "transaction_type",
    "quantity",
    "price",
    "currency",
    "transaction_cost",
)


@dataclass
class AcceptedTransaction:
    transaction_id: str
    ticker_symbol: str
    transaction_type: str
    transaction_date: datetime
    warnings: list[str] = field(default_factory=list)


@dataclass
class RejectedTransaction:
    transaction: BulkTransactionItem
    reason: str


@dataclass
class BulkUploadResult:
    accepted: list[AcceptedTransaction] = field(default_factory=list)
    rejected: list[RejectedTransaction] = field(default_factory=list)


@dataclass
class TransactionUpdateResult:
    transaction: Transaction
    warnings: list[str] = field(default_factory=list)


def _format_quantity(value: Decimal) -> str:
    return f"{Decimal(str(value)).normalize():f}"


async def _ensure_portfolio(portfolio_id: str, portfolios: PortfolioRepository) -> None:
    if await portfolios.get(portfolio_id) is None:
        raise PortfolioNotFoundError(portfolio_id)


async def _resolve_tickers(
    symbols: list[str], trading_items: TradingItemRepository
) -> tuple[dict[str, int], dict[str, str]]:
    """Map each distinct ticker to a trading item id, or to a rejection reason."""

    resolved: dict[str, int] = {}
    reasons: dict[str, str] = {}
    for symbol in dict.fromkeys(symbols):
        try:
            parsed = parse_ticker(symbol)
        except InvalidTickerError as exc:
            reasons[symbol] = str(exc)
            continue
        item = await trading_items.find_by_exchange_and_ticker(parsed.exchange_symbol, parsed.ticker_symbol)
        if item is None:
            reasons[symbol] = f"Unknown ticker symbol: {symbol}"
            continue
        resolved[symbol] = item.id
    return resolved, reasons


async def bulk_upload_transactions(
    portfolio_id: str,
    items: list[BulkTransactionItem],
    *,
    portfolios: PortfolioRepository,
    transactions: TransactionRepository,
    trading_items: TradingItemRepository,
    default_currency: str = DEFAULT_CURRENCY,
    now: datetime | None = None,
) -> BulkUploadResult:
    """Insert every item whose ticker resolves; reject the rest with a reason.

    Sells that exceed the running holding are still accepted but carry a warning.
    The running holding starts from everything already stored up to ``now`` and
    advances through the batch in request order.
    """

    await _ensure_portfolio(portfolio_id, portfolios)

    resolved, reasons = await _resolve_tickers([item.ticker_symbol for item in items], trading_items)
    running = await transactions.holdings_at(portfolio_id, now or datetime.now(timezone.utc))

    result = BulkUploadResult()
    records: list[dict[str, Any]] = []
    pending: list[tuple[BulkTransactionItem, list[str]]] = []
    for item in items:
        trading_item_id = resolved.get(item.ticker_symbol)
        if trading_item_id is None:
            result.rejected.append(RejectedTransaction(transaction=item, reason=reasons[item.ticker_symbol]))
            continue

        quantity = Decimal(str(item.quantity))
        warnings: list[str] = []
        if item.transaction_type == SELL:
            held = running.get(trading_item_id, Decimal("0"))
            if quantity > held:
                warnings.append(
                    f"Sell quantity ({_format_quantity(quantity)}) exceeds current holdings "
                    f"({_format_quantity(held)}) for {item.ticker_symbol}"
                )
                logger.warning(
                    "Portfolio %s: sell of %s %s exceeds holding of %s",
                    portfolio_id,
                    quantity,
                    item.ticker_symbol,
                    held,
                )

        transaction_date = as_utc(item.transaction_date)
        apply_transaction(
            running,
            TransactionInput(
                id="",
                trading_item_id=trading_item_id,
                transaction_date=transaction_date,
                transaction_type=item.transaction_type,
                quantity=quantity,
            ),
        )
        records.append(
            {
                "portfolio_id": portfolio_id,
                "trading_item_id": trading_item_id,
                "transaction_date": transaction_date,
                "transaction_type": item.transaction_type,
                "quantity": quantity,
                "price": Decimal(str(item.price)),
                "currency": (item.currency or default_currency).upper(),
                "transaction_cost": Decimal(str(item.transaction_cost)),
            }
        )
        pending.append((item, warnings))

    if records:
        created = await transactions.bulk_create(records)
        for record, (item, warnings) in zip(created, pending):
            result.accepted.append(
                AcceptedTransaction(
                    transaction_id=record.id,
                    ticker_symbol=item.ticker_symbol,
                    transaction_type=record.transaction_type,
                    transaction_date=record.transaction_date,
                    warnings=warnings,
                )
            )

    logger.info(
        "Portfolio %s bulk upload: %d accepted, %d rejected",
        portfolio_id,
        len(result.accepted),
        len(result.rejected),
    )
    return result


async def _load_owned_transaction(
    portfolio_id: str, transaction_id: str, transactions: TransactionRepository
) -> Transaction:
    transaction = await transactions.get(transaction_id)
    if transaction is None or transaction.portfolio_id != portfolio_id:
        raise TransactionNotFoundError(transaction_id)
    return transaction


async def update_transaction(
    portfolio_id: str,
    transaction_id: str,
    changes: dict[str, Any],
    *,
    portfolios: PortfolioRepository,
    transactions: TransactionRepository,
) -> TransactionUpdateResult:
    await _ensure_portfolio(portfolio_id, portfolios)
    transaction = await _load_owned_transaction(portfolio_id, transaction_id, transactions)

    updates: dict[str, Any] = {}
    for name in _UPDATABLE_FIELDS:
        value = changes.get(name)
        if value is None:
            continue
        if name == "transaction_date":
            value = as_utc(value)
        elif name == "currency":
            value = value.upper()
        elif name in {"quantity", "price", "transaction_cost"}:
            value = Decimal(str(value))
        updates[name] = value

    updated = await transactions.update(transaction, updates)
    logger.info("Updated transaction %s in portfolio %s", transaction_id, portfolio_id)

    # Holdings on the transaction date already include the updated row.
    warnings: list[str] = []
    if updated.transaction_type == SELL:
        holdings = await transactions.holdings_at(portfolio_id, updated.transaction_date)
        held = holdings.get(updated.trading_item_id)
        if held is None or held < 0:
            warnings.append(f"Sell quantity may exceed holdings for trading item {updated.trading_item_id}")
            logger.warning(
                "Portfolio %s: updated sell %s may exceed holdings of trading item %s",
                portfolio_id,
                transaction_id,
                updated.trading_item_id,
            )

    return TransactionUpdateResult(transaction=updated, warnings=warnings)


async def delete_transaction(
    portfolio_id: str,
    transaction_id: str,
    *,
    portfolios: PortfolioRepository,
    transactions: TransactionRepository,
) -> None:
    await _ensure_portfolio(portfolio_id, portfolios)
    transaction = await _load_owned_transaction(portfolio_id, transaction_id, transactions)
    await transactions.delete(transaction)
    logger.info("Deleted transaction %s from portfolio %s", transaction_id, portfolio_id)


__all__ = [
    "AcceptedTransaction",
    "RejectedTransaction",
    "BulkUploadResult",
    "TransactionUpdateResult",
    "bulk_upload_transactions",
    "update_transaction",
    "delete_transaction",
]
