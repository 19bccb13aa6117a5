"""Replay of buy/sell transactions into per-instrument net quantities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Iterator

from .dates import to_utc_date

BUY = "buy"
SELL = "sell"

HoldingsState = dict[int, Decimal]


@dataclass(frozen=True)
class TransactionInput:
    """Normalized transaction input for holdings replay."""

    id: str
    trading_item_id: int
    transaction_date: datetime | date
    transaction_type: str
    quantity: Decimal
    price: Decimal = Decimal("0")
    currency: str = "AUD"
    transaction_cost: Decimal = Decimal("0")
    portfolio_id: str | None = None

    @property
    def effective_date(self) -> date:
        return to_utc_date(self.transaction_date)


def signed_quantity(tx: TransactionInput) -> Decimal:
    quantity = Decimal(str(tx.quantity))
    if tx.transaction_type == BUY:
        return quantity
    if tx.transaction_type == SELL:
        return -quantity
    raise ValueError(f"Unsupported transaction type: {tx.transaction_type}")


def apply_transaction(state: HoldingsState, tx: TransactionInput) -> None:
    """Fold one transaction into ``state``. Net quantities are not floored at zero."""

    state[tx.trading_item_id] = state.get(tx.trading_item_id, Decimal("0")) + signed_quantity(tx)


def order_for_replay(transactions: Iterable[TransactionInput]) -> list[TransactionInput]:
    # sorted() is stable, so same-day transactions keep their incoming order.
    return sorted(transactions, key=lambda tx: tx.effective_date)


def net_quantity_before(transactions: Iterable[TransactionInput], cutoff: date) -> HoldingsState:
    """Net quantity per trading item from every transaction strictly before ``cutoff``."""

    state: HoldingsState = {}
    for tx in order_for_replay(transactions):
        if tx.effective_date >= cutoff:
            break
        apply_transaction(state, tx)
    return state


def group_by_effective_date(transactions: Iterable[TransactionInput]) -> dict[date, list[TransactionInput]]:
    grouped: dict[date, list[TransactionInput]] = {}
    for tx in order_for_replay(transactions):
        grouped.setdefault(tx.effective_date, []).append(tx)
    return grouped


def held_positions(state: HoldingsState) -> Iterator[tuple[int, Decimal]]:
    """Positions that count towards valuation; zero and short quantities are skipped."""

    for trading_item_id, quantity in state.items():
        if quantity > 0:
            yield trading_item_id, quantity


def instruments_of(transactions: Iterable[TransactionInput]) -> set[int]:
    return {tx.trading_item_id for tx in transactions}


__all__ = [
    "BUY",
    "SELL",
    "HoldingsState",
    "TransactionInput",
    "signed_quantity",
    "apply_transaction",
    "order_for_replay",
    "net_quantity_before",
    "group_by_effective_date",
    "held_positions",
    "instruments_of",
]
