import pytest
from fastapi import FastAPI
from pydantic import ValidationError

from portfolio_returns.config import AppSettings
from portfolio_returns.core.telemetry import setup_telemetry


def test_defaults_match_service_limits() -> None:
    settings = AppSettings(database_url="sqlite+aiosqlite:///:memory:")

    assert settings.price_lookback_days == 7
    assert settings.returns_default_days == 30
    assert settings.returns_max_days == 30
    assert settings.default_currency == "AUD"


def test_dict_for_logging_hides_database_password() -> None:
    settings = AppSettings(database_url="postgresql+asyncpg://user:s3cret@db:5432/portfolio")

    logged = settings.dict_for_logging()

    assert "s3cret" not in logged["database_url"]
    assert logged["database_url"].startswith("postgresql+asyncpg://user:")


def test_negative_lookback_is_rejected() -> None:
    with pytest.raises(ValidationError):
        AppSettings(price_lookback_days=-1)


def test_telemetry_disabled_by_configuration() -> None:
    settings = AppSettings(database_url="sqlite+aiosqlite:///:memory:", telemetry_enabled=False)

    assert setup_telemetry(FastAPI(), settings) is False
