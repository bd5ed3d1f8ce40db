# src/api/exception_handlers.py

"""Convert application errors into JSON error bodies.

Register on an app with :func:`register_exception_handlers`.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.errors import NaftasError

logger = logging.getLogger("naftas.api")


async def naftas_error_handler(
    request: Request, exc: NaftasError,
) -> JSONResponse:
    """Map a NaftasError to its status code and ``{"error": ...}``."""
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc,
        )
    else:
        logger.warning(
            "%s %s rejected (%d): %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Request validation failures are plain 400s."""
    logger.warning(
        "%s %s invalid request: %s",
        request.method,
        request.url.path,
        exc.errors(),
    )
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request parameters"},
    )


async def unhandled_error_handler(
    request: Request, exc: Exception,
) -> JSONResponse:
    """Last resort: never leak a traceback to the client."""
    logger.critical(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NaftasError, naftas_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, validation_error_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_error_handler)
