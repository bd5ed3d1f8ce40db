# src/api/app.py

"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.exception_handlers import register_exception_handlers
from src.api.routes import close_increases_client, router
from src.config.logging_config import setup_logging
from src.config.settings import Settings
from src.errors import ConfigurationError

logger = logging.getLogger("naftas.api")


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    close_increases_client()
    logger.info("API stopped, shared clients closed")


def create_app(source_id: str | None = None) -> FastAPI:
    """Build the API app with logging, CORS and error handlers.

    *source_id* pins the price source for every request; when omitted
    ``Settings.PRICE_SOURCE`` is read per request.
    """
    setup_logging()

    known = [s["id"] for s in Settings.AVAILABLE_SOURCES]
    if source_id is not None and source_id not in known:
        raise ConfigurationError(
            f"Unknown price source '{source_id}' "
            f"(available: {', '.join(known)})"
        )

    app = FastAPI(title="naftas", version="0.1.0", lifespan=_lifespan)
    app.state.price_source_id = source_id
    app.add_middleware(
        CORSMiddleware,
        allow_origins=Settings.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    register_exception_handlers(app)
    app.include_router(router)

    logger.info(
        "API ready (price source=%s, cors=%s)",
        source_id or Settings.PRICE_SOURCE,
        Settings.CORS_ORIGINS,
    )
    return app
