"""CLI wrapper for loading the end-of-day price CSV."""

from __future__ import annotations

import argparse
import asyncio

from sqlalchemy import func, select

from portfolio_returns.config import get_settings
from portfolio_returns.core.logging import setup_logging
from portfolio_returns.db import Database
from portfolio_returns.models import Company, HistoricalPrice, TradingItem
from portfolio_returns.services.price_loader import load_price_csv


async def _run(path: str, batch_size: int, database_url: str) -> None:
    database = Database(database_url)
    try:
        await database.create_all()
        summary = await load_price_csv(path, database, batch_size=batch_size)
        print(f"Processed {summary.rows} price rows in {summary.batches} batches from {path}")
        async with database.session() as session:
            for label, model in (("companies", Company), ("trading items", TradingItem), ("prices", HistoricalPrice)):
                count = (await session.execute(select(func.count()).select_from(model))).scalar_one()
                print(f"  {label}: {count}")
    finally:
        await database.dispose()


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Load company, trading item and daily close data from CSV")
    parser.add_argument("csv_file", nargs="?", default=settings.price_csv_path)
    parser.add_argument("--batch-size", type=int, default=settings.price_csv_batch_size)
    parser.add_argument("--database-url", default=settings.database_url)
    args = parser.parse_args()
    setup_logging(settings.log_level)
    asyncio.run(_run(args.csv_file, args.batch_size, args.database_url))


if __name__ == "__main__":
    main()
