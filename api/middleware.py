"""
Global middleware and exception handlers.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI) -> None:
    """Attach any app-level middleware."""

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.info(
            "%s %s -> %d (%.3fs)",
            request.method, request.url.path, response.status_code, elapsed,
        )
        return response


def register_exception_handlers(app: FastAPI) -> None:
    """Storage failures become a plain 500; the traceback stays in the log."""

    @app.exception_handler(SQLAlchemyError)
    async def storage_unavailable(request: Request, exc: SQLAlchemyError):
        logger.error(
            "Storage error on %s %s", request.method, request.url.path, exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Storage unavailable"})
