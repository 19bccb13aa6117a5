"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import FastAPI

from . import __version__
from .api.errors import register_exception_handlers
from .api.routes import api_router
from .config import AppSettings, get_settings
from .core.logging import setup_logging
from .core.telemetry import setup_telemetry
from .db import Database

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None, settings: AppSettings | None = None) -> FastAPI:
    """Build the application around ``database`` (defaults to the configured URL)."""

    settings = settings or get_settings()
    database = database or Database(settings.database_url)
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Portfolio returns service configuration", extra=settings.dict_for_logging())
        await database.create_all()
        yield
        await database.dispose()

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    setup_telemetry(app, settings, engine=database.engine)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()

__all__ = ["app", "create_app"]
