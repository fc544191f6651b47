"""Middleware for the FastAPI application."""

import logging
import time
from typing import Any, Awaitable, Callable

from fastapi import FastAPI, Request  # type: ignore[import-untyped]
from fastapi.middleware.cors import CORSMiddleware  # type: ignore[import-untyped]
from fastapi.responses import JSONResponse  # type: ignore[import-untyped]

from time_ledger.core.config import ConfigManager

logger = logging.getLogger(__name__)


def setup_cors(app: FastAPI, config: ConfigManager) -> None:
    """Configure CORS middleware from the api.cors config section."""
    if not config.get("api.cors.enabled", True):
        return

    origins = config.get("api.cors.origins", ["http://localhost:3000"])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )


def setup_request_logging(app: FastAPI) -> None:
    """Log every request with its status and duration at DEBUG."""

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Any]]
    ) -> Any:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
        return response


def setup_error_handlers(app: FastAPI) -> None:
    """Turn stray ValueErrors (unknown period, bad weekday) into HTTP 400."""

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.warning(f"Rejected {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content={"detail": str(exc)})


def setup_middleware(app: FastAPI, config: ConfigManager) -> None:
    """Set up CORS, request logging and error handlers."""
    setup_cors(app, config)
    setup_request_logging(app)
    setup_error_handlers(app)
