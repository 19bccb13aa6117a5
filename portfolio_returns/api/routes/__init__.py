"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .portfolios import router as portfolios_router
from .transactions import router as transactions_router

api_router = APIRouter()
api_router.include_router(portfolios_router, prefix="/portfolios", tags=["portfolios"])
api_router.include_router(transactions_router, prefix="/portfolios", tags=["transactions"])

__all__ = ["api_router"]
