from contextlib import asynccontextmanager
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

from httpx import ASGITransport, AsyncClient

from portfolio_returns.config import AppSettings
from portfolio_returns.db import Database
from portfolio_returns.main import create_app
from portfolio_returns.models import Company, HistoricalPrice, TradingItem

BHP_ID = 101
CBA_ID = 202


def _client(database: Database, settings: AppSettings):
    app = create_app(database, settings)

    @asynccontextmanager
    async def _manager():
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client

    return _manager


async def _seed_market(database: Database, closes: dict[int, list[tuple[date, str]]]) -> None:
    async with database.session() as session:
        session.add_all(
            [
                Company(id="C1", name="BHP Group", primary_industry_id=1),
                Company(id="C2", name="Commonwealth Bank", primary_industry_id=2),
                TradingItem(
                    id=BHP_ID, company_id="C1", exchange_symbol="ASX", ticker_symbol="BHP", exchange_country_iso="AU"
                ),
                TradingItem(
                    id=CBA_ID, company_id="C2", exchange_symbol="ASX", ticker_symbol="CBA", exchange_country_iso="AU"
                ),
            ]
        )
        for trading_item_id, series in closes.items():
            for day, close in series:
                session.add(
                    HistoricalPrice(
                        trading_item_id=trading_item_id,
                        pricing_date=day,
                        price_close_aud=Decimal(close),
                        price_close_usd=Decimal(close),
                    )
                )
        await session.commit()


def _iso(day: date) -> str:
    return datetime.combine(day, time(10, 0), tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")


async def _create_portfolio(client: AsyncClient, name: str = "Core") -> str:
    response = await client.post("/api/portfolios", json={"name": name})
    assert response.status_code == 201
    payload = response.json()
    assert payload["name"] == name
    return payload["portfolioId"]


async def test_health(database: Database, settings: AppSettings) -> None:
    async with _client(database, settings)() as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_ten_day_returns_follow_transactions_and_prices(database: Database, settings: AppSettings) -> None:
    today = datetime.now(timezone.utc).date()
    window_start = today - timedelta(days=9)
    closes = ["10", "10.5", "11", "11.5", "12", "11.5", "11", "11.5", "12", "12.5"]

    async with _client(database, settings)() as client:
        await _seed_market(
            database,
            {BHP_ID: [(window_start + timedelta(days=offset), close) for offset, close in enumerate(closes)]},
        )
        portfolio_id = await _create_portfolio(client)
        upload = await client.post(
            f"/api/portfolios/{portfolio_id}/transactions",
            json={
                "transactions": [
                    {"tickerSymbol": "ASX:BHP", "transactionDate": _iso(today - timedelta(days=20)),
                     "transactionType": "buy", "quantity": 100, "price": 9.5},
                    {"tickerSymbol": "ASX:BHP", "transactionDate": _iso(today - timedelta(days=7)),
                     "transactionType": "buy", "quantity": 50, "price": 11},
                    {"tickerSymbol": "ASX:BHP", "transactionDate": _iso(today - timedelta(days=3)),
                     "transactionType": "sell", "quantity": 30, "price": 11},
                    {"tickerSymbol": "ASX:BHP", "transactionDate": _iso(today - timedelta(days=1)),
                     "transactionType": "buy", "quantity": 20, "price": 12},
                ]
            },
        )
        assert upload.status_code == 207

        response = await client.get(f"/api/portfolios/{portfolio_id}/returns", params={"days": 10})

    assert response.status_code == 200
    payload = response.json()
    assert payload["portfolioId"] == portfolio_id
    assert [point["date"] for point in payload["returns"]] == [
        (window_start + timedelta(days=offset)).isoformat() for offset in range(10)
    ]
    assert [point["portfolioValue"] for point in payload["returns"]] == [
        1000, 1050, 1650, 1725, 1800, 1725, 1320, 1380, 1680, 1750
    ]
    assert payload["returns"][0]["dailyReturn"] == 0
    assert abs(payload["returns"][2]["dailyReturn"] - 600 / 1050) < 1e-9


async def test_returns_default_to_thirty_days(database: Database, settings: AppSettings) -> None:
    async with _client(database, settings)() as client:
        portfolio_id = await _create_portfolio(client)
        response = await client.get(f"/api/portfolios/{portfolio_id}/returns")

    assert response.status_code == 200
    returns = response.json()["returns"]
    assert len(returns) == 30
    assert all(point["portfolioValue"] == 0 and point["dailyReturn"] == 0 for point in returns)


async def test_returns_reject_out_of_range_days(database: Database, settings: AppSettings) -> None:
    async with _client(database, settings)() as client:
        portfolio_id = await _create_portfolio(client)
        too_many = await client.get(f"/api/portfolios/{portfolio_id}/returns", params={"days": 31})
        too_few = await client.get(f"/api/portfolios/{portfolio_id}/returns", params={"days": 0})
        not_a_number = await client.get(f"/api/portfolios/{portfolio_id}/returns", params={"days": "abc"})

    for response in (too_many, too_few, not_a_number):
        assert response.status_code == 400
        assert response.json()["error"] == "Validation Error"
        assert "details" in response.json()


async def test_returns_unknown_portfolio_is_404(database: Database, settings: AppSettings) -> None:
    async with _client(database, settings)() as client:
        response = await client.get("/api/portfolios/does-not-exist/returns", params={"days": 5})

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found", "message": "Portfolio not found: does-not-exist"}


async def test_bulk_upload_reports_accepted_rejected_and_warnings(database: Database, settings: AppSettings) -> None:
    today = datetime.now(timezone.utc).date()

    async with _client(database, settings)() as client:
        await _seed_market(database, {})
        portfolio_id = await _create_portfolio(client)
        response = await client.post(
            f"/api/portfolios/{portfolio_id}/transactions",
            json={
                "transactions": [
                    {"tickerSymbol": "ASX:CBA", "transactionDate": _iso(today - timedelta(days=5)),
                     "transactionType": "buy", "quantity": 10, "price": 100},
                    {"tickerSymbol": "ASX:CBA", "transactionDate": _iso(today - timedelta(days=2)),
                     "transactionType": "sell", "quantity": 15, "price": 101},
                    {"tickerSymbol": "NYSE:IBM", "transactionDate": _iso(today - timedelta(days=2)),
                     "transactionType": "buy", "quantity": 1, "price": 150},
                ]
            },
        )

    assert response.status_code == 207
    payload = response.json()
    accepted = payload["acceptedTransactions"]
    assert [item["transactionType"] for item in accepted] == ["buy", "sell"]
    assert "warnings" not in accepted[0]
    assert accepted[1]["warnings"] == ["Sell quantity (15) exceeds current holdings (10) for ASX:CBA"]
    assert all(item["transactionId"] for item in accepted)
    rejected = payload["rejectedTransactions"]
    assert len(rejected) == 1
    assert rejected[0]["reason"] == "Unknown ticker symbol: NYSE:IBM"
    assert rejected[0]["transaction"]["tickerSymbol"] == "NYSE:IBM"


async def test_bulk_upload_validation_errors(database: Database, settings: AppSettings) -> None:
    async with _client(database, settings)() as client:
        portfolio_id = await _create_portfolio(client)
        empty = await client.post(f"/api/portfolios/{portfolio_id}/transactions", json={"transactions": []})
        negative = await client.post(
            f"/api/portfolios/{portfolio_id}/transactions",
            json={
                "transactions": [
                    {"tickerSymbol": "ASX:BHP", "transactionDate": "2024-01-02T00:00:00Z",
                     "transactionType": "buy", "quantity": -1, "price": 1}
                ]
            },
        )
        missing_portfolio = await client.post(
            "/api/portfolios/missing/transactions",
            json={
                "transactions": [
                    {"tickerSymbol": "ASX:BHP", "transactionDate": "2024-01-02T00:00:00Z",
                     "transactionType": "buy", "quantity": 1, "price": 1}
                ]
            },
        )

    assert empty.status_code == 400
    assert negative.status_code == 400
    assert missing_portfolio.status_code == 404


async def test_update_and_delete_transaction(database: Database, settings: AppSettings) -> None:
    today = datetime.now(timezone.utc).date()

    async with _client(database, settings)() as client:
        await _seed_market(database, {})
        portfolio_id = await _create_portfolio(client)
        upload = await client.post(
            f"/api/portfolios/{portfolio_id}/transactions",
            json={
                "transactions": [
                    {"tickerSymbol": "asx bhp", "transactionDate": _iso(today - timedelta(days=4)),
                     "transactionType": "buy", "quantity": 10, "price": 40}
                ]
            },
        )
        tx_id = upload.json()["acceptedTransactions"][0]["transactionId"]

        updated = await client.put(
            f"/api/portfolios/{portfolio_id}/transactions/{tx_id}",
            json={"quantity": 12, "transactionCost": 9.95},
        )
        to_sell = await client.put(
            f"/api/portfolios/{portfolio_id}/transactions/{tx_id}",
            json={"transactionType": "sell", "transactionDate": _iso(today - timedelta(days=10))},
        )
        deleted = await client.delete(f"/api/portfolios/{portfolio_id}/transactions/{tx_id}")
        deleted_again = await client.delete(f"/api/portfolios/{portfolio_id}/transactions/{tx_id}")

    assert updated.status_code == 200
    body = updated.json()
    assert body["transaction"]["quantity"] == 12
    assert body["transaction"]["transactionCost"] == 9.95
    assert body["transaction"]["tradingItemId"] == BHP_ID
    assert "warnings" not in body

    assert to_sell.status_code == 200
    assert to_sell.json()["warnings"] == [f"Sell quantity may exceed holdings for trading item {BHP_ID}"]

    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Transaction deleted successfully"}
    assert deleted_again.status_code == 404


async def test_create_portfolio_requires_name(database: Database, settings: AppSettings) -> None:
    async with _client(database, settings)() as client:
        response = await client.post("/api/portfolios", json={"name": ""})

    assert response.status_code == 400


async def test_blank_portfolio_name_is_a_validation_error(database: Database, settings: AppSettings) -> None:
    async with _client(database, settings)() as client:
        response = await client.post("/api/portfolios", json={"name": "   "})

    assert response.status_code == 400
    assert response.json()["message"] == "Portfolio name must not be empty"


async def test_internal_value_errors_are_server_errors(database: Database, settings: AppSettings) -> None:
    app = create_app(database, settings)

    @app.get("/broken")
    async def broken() -> dict[str, str]:
        raise ValueError("window end precedes start")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/broken")
    await database.dispose()

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error", "message": "An unexpected error occurred"}
