"""Pydantic schemas for portfolios and their daily returns."""

from __future__ import annotations

from datetime import date

from pydantic import Field

from .common import CamelModel


class PortfolioCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Core ASX holdings"])


class PortfolioSchema(CamelModel):
    portfolio_id: str
    name: str


class ReturnPointSchema(CamelModel):
    date: date
    portfolio_value: float
    daily_return: float


class PortfolioReturnsSchema(CamelModel):
    portfolio_id: str
    returns: list[ReturnPointSchema]


__all__ = [
    "PortfolioCreateRequest",
    "PortfolioSchema",
    "ReturnPointSchema",
    "PortfolioReturnsSchema",
]
