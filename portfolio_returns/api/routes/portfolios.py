"""Portfolio creation and daily returns endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from ...config import AppSettings
from ...schemas import PortfolioCreateRequest, PortfolioReturnsSchema, PortfolioSchema, ReturnPointSchema
from ...services import portfolio as portfolio_service
from ...services.exceptions import InvalidRequestError
from ...services.repositories import (
    SqlHistoricalPriceRepository,
    SqlPortfolioRepository,
    SqlTransactionRepository,
)
from ..dependencies import (
    get_app_settings,
    get_portfolio_repository,
    get_price_repository,
    get_transaction_repository,
)

router = APIRouter()


@router.post("", response_model=PortfolioSchema, status_code=status.HTTP_201_CREATED)
async def post_portfolio(
    payload: PortfolioCreateRequest,
    portfolios: SqlPortfolioRepository = Depends(get_portfolio_repository),
) -> PortfolioSchema:
    portfolio = await portfolio_service.create_portfolio(payload.name, portfolios=portfolios)
    return PortfolioSchema(portfolio_id=portfolio.id, name=portfolio.name)


@router.get("/{portfolio_id}/returns", response_model=PortfolioReturnsSchema)
async def get_portfolio_returns(
    portfolio_id: str,
    days: int | None = Query(default=None, description="Window length in days, today included"),
    settings: AppSettings = Depends(get_app_settings),
    portfolios: SqlPortfolioRepository = Depends(get_portfolio_repository),
    transactions: SqlTransactionRepository = Depends(get_transaction_repository),
    prices: SqlHistoricalPriceRepository = Depends(get_price_repository),
) -> PortfolioReturnsSchema:
    window = settings.returns_default_days if days is None else days
    if not 1 <= window <= settings.returns_max_days:
        raise InvalidRequestError(
            "Invalid query parameters",
            details=[
                {
                    "loc": ["query", "days"],
                    "msg": f"days must be between 1 and {settings.returns_max_days}",
                    "input": days,
                }
            ],
        )

    result = await portfolio_service.get_portfolio_returns(
        portfolio_id,
        window,
        portfolios=portfolios,
        transactions=transactions,
        prices=prices,
        lookback_days=settings.price_lookback_days,
    )
    return PortfolioReturnsSchema(
        portfolio_id=result.portfolio_id,
        returns=[
            ReturnPointSchema(
                date=point.date,
                portfolio_value=float(point.portfolio_value),
                daily_return=float(point.daily_return),
            )
            for point in result.points
        ],
    )
