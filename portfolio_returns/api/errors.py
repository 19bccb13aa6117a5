"""Translate service errors into JSON error responses."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..services.exceptions import InvalidRequestError, PortfolioNotFoundError, TransactionNotFoundError

logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, message: str, details: Any | None = None) -> JSONResponse:
    body: dict[str, Any] = {"error": error, "message": message}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=body)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Validation Error",
        "Invalid request data",
        details=exc.errors(),
    )


async def _invalid_request(request: Request, exc: InvalidRequestError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation Error", str(exc), details=exc.details)


async def _not_found(request: Request, exc: LookupError) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, "Not Found", str(exc))


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(InvalidRequestError, _invalid_request)
    app.add_exception_handler(PortfolioNotFoundError, _not_found)
    app.add_exception_handler(TransactionNotFoundError, _not_found)
    app.add_exception_handler(Exception, _unhandled)


__all__ = ["error_response", "register_exception_handlers"]
