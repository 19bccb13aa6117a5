"""Bulk loader for the vendor end-of-day price CSV.

Each CSV row carries the company, its trading item and one daily close. Rows
are read in chunks with pandas; companies and trading items are upserted and
prices are inserted with duplicates on (trading item, date) skipped so the
first loaded close wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import pandas as pd
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import Database
from ..models import Company, HistoricalPrice, TradingItem

logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    "COMPANY_ID",
    "TICKER_SYMBOL",
    "COMPANY_NAME",
    "EXCHANGE_SYMBOL",
    "EXCHANGE_COUNTRY_ISO",
    "PRIMARY_INDUSTRY_ID",
    "TRADING_ITEM_ID",
    "PRICING_DATE",
    "PRICE_CLOSE",
    "PRICE_CLOSE_USD",
    "SHARES_OUTSTANDING",
    "MARKET_CAP",
)

DEFAULT_BATCH_SIZE = 100_000
# Keeps multi-row INSERTs under the bind parameter limits of SQLite and PostgreSQL.
STATEMENT_ROWS = 1_000


@dataclass
class LoadSummary:
    rows: int = 0
    batches: int = 0


def _insert_for(session: AsyncSession):
    dialect = session.bind.dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise ValueError(f"Unsupported database dialect for price loading: {dialect}")


def _chunked(rows: list[dict[str, Any]], size: int) -> Iterator[list[dict[str, Any]]]:
    for start in range(0, len(rows), size):
        yield rows[start : start + size]


def _optional_int(value: Any) -> int | None:
    if pd.isna(value):
        return None
    return int(value)


def _optional_float(value: Any) -> float | None:
    if pd.isna(value):
        return None
    return float(value)


def normalize_chunk(frame: pd.DataFrame) -> pd.DataFrame:
    """Validate the header and coerce a raw CSV chunk to typed columns."""

    missing = [column for column in CSV_COLUMNS if column not in frame.columns]
    if missing:
        raise ValueError(f"Price CSV is missing columns: {', '.join(missing)}")

    df = frame.copy()
    for column in ("COMPANY_ID", "TICKER_SYMBOL", "COMPANY_NAME", "EXCHANGE_SYMBOL", "EXCHANGE_COUNTRY_ISO"):
        df[column] = df[column].astype(str).str.strip()
    df["EXCHANGE_SYMBOL"] = df["EXCHANGE_SYMBOL"].str.upper()
    df["TICKER_SYMBOL"] = df["TICKER_SYMBOL"].str.upper()
    df["TRADING_ITEM_ID"] = pd.to_numeric(df["TRADING_ITEM_ID"], errors="raise").astype("int64")
    df["PRICING_DATE"] = pd.to_datetime(df["PRICING_DATE"], utc=True, format="mixed").dt.date
    for column in ("PRICE_CLOSE", "PRICE_CLOSE_USD", "SHARES_OUTSTANDING", "MARKET_CAP", "PRIMARY_INDUSTRY_ID"):
        df[column] = pd.to_numeric(df[column], errors="coerce")
    return df.dropna(subset=["PRICE_CLOSE"])


def _company_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    unique = df.drop_duplicates(subset=["COMPANY_ID"], keep="first")
    return [
        {
            "id": row.COMPANY_ID,
            "name": row.COMPANY_NAME,
            "primary_industry_id": _optional_int(row.PRIMARY_INDUSTRY_ID),
        }
        for row in unique.itertuples(index=False)
    ]


def _trading_item_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    unique = df.drop_duplicates(subset=["TRADING_ITEM_ID"], keep="first")
    return [
        {
            "id": int(row.TRADING_ITEM_ID),
            "company_id": row.COMPANY_ID,
            "exchange_symbol": row.EXCHANGE_SYMBOL,
            "ticker_symbol": row.TICKER_SYMBOL,
            "exchange_country_iso": row.EXCHANGE_COUNTRY_ISO,
        }
        for row in unique.itertuples(index=False)
    ]


def _price_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    unique = df.drop_duplicates(subset=["TRADING_ITEM_ID", "PRICING_DATE"], keep="first")
    return [
        {
            "trading_item_id": int(row.TRADING_ITEM_ID),
            "pricing_date": row.PRICING_DATE,
            "price_close_aud": float(row.PRICE_CLOSE),
            "price_close_usd": _optional_float(row.PRICE_CLOSE_USD) or float(row.PRICE_CLOSE),
            "shares_outstanding": _optional_int(row.SHARES_OUTSTANDING),
            "market_cap": _optional_float(row.MARKET_CAP),
        }
        for row in unique.itertuples(index=False)
    ]


async def load_batch(session: AsyncSession, frame: pd.DataFrame) -> int:
    """Write one chunk and commit. Returns the number of price rows offered."""

    df = normalize_chunk(frame)
    if df.empty:
        return 0
    insert = _insert_for(session)

    for rows in _chunked(_company_rows(df), STATEMENT_ROWS):
        stmt = insert(Company).values(rows)
        await session.execute(
            stmt.on_conflict_do_update(
                index_elements=[Company.id],
                set_={"name": stmt.excluded.name, "primary_industry_id": stmt.excluded.primary_industry_id},
            )
        )

    for rows in _chunked(_trading_item_rows(df), STATEMENT_ROWS):
        stmt = insert(TradingItem).values(rows)
        await session.execute(
            stmt.on_conflict_do_update(
                index_elements=[TradingItem.id],
                set_={
                    "company_id": stmt.excluded.company_id,
                    "exchange_symbol": stmt.excluded.exchange_symbol,
                    "ticker_symbol": stmt.excluded.ticker_symbol,
                    "exchange_country_iso": stmt.excluded.exchange_country_iso,
                },
            )
        )

    price_rows = _price_rows(df)
    for rows in _chunked(price_rows, STATEMENT_ROWS):
        stmt = insert(HistoricalPrice).values(rows)
        await session.execute(
            stmt.on_conflict_do_nothing(index_elements=[HistoricalPrice.trading_item_id, HistoricalPrice.pricing_date])
        )

    await session.commit()
    return len(price_rows)


async def load_price_csv(
    path: str | Path,
    database: Database,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> LoadSummary:
    csv_path = Path(path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Price CSV not found: {csv_path}")

    summary = LoadSummary()
    reader = pd.read_csv(csv_path, chunksize=batch_size, dtype=str)
    for chunk in reader:
        async with database.session() as session:
            loaded = await load_batch(session, chunk)
        summary.rows += loaded
        summary.batches += 1
        logger.info("Loaded price batch %d (%d rows, %d total)", summary.batches, loaded, summary.rows)

    logger.info("Finished loading %s: %d rows in %d batches", csv_path, summary.rows, summary.batches)
    return summary


__all__ = [
    "CSV_COLUMNS",
    "DEFAULT_BATCH_SIZE",
    "LoadSummary",
    "normalize_chunk",
    "load_batch",
    "load_price_csv",
]
