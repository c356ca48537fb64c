from __future__ import annotations

import logging
import os
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Optional

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from api_routes import router
from core.error_handlers import (
    generic_exception_handler,
    http_exception_handler,
    invalid_format_handler,
    missing_fields_handler,
    runtime_error_handler,
    value_error_handler,
)
from core.exceptions import (
    InvalidFormatError,
    MissingFieldsError,
)
from core.store import ExpenseStore, create_default_store

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@dataclass
class AppConfig:
    """Configuration values used when constructing a FastAPI application."""

    title: str
    description: str
    version: str = "1.0.0"
    environment: Optional[str] = None
    root_message: str = "Expenses API"
    log_context: Optional[str] = None

    @property
    def context_label(self) -> str:
        """Return the string used in lifecycle logs."""
        return self.log_context or self.title


def _configure_logging() -> logging.Logger:
    """Configure application logging and return the shared logger."""
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )
    logger = logging.getLogger("expenses_api.api")
    logger.setLevel(level)
    return logger


def create_app(config: AppConfig, store: Optional[ExpenseStore] = None) -> FastAPI:
    """Create a FastAPI application instance bound to an expense store.

    When no store is given the default in-memory store is built here, so its
    lifetime matches the process that imported the entry module.
    """
    logger = _configure_logging()
    expense_store = store if store is not None else create_default_store()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle startup and shutdown tasks shared across environments."""
        logger.info("Starting %s", config.context_label)
        logger.info("Expense store holds %d expenses", len(expense_store.list()))

        yield

        logger.info("Shutting down %s", config.context_label)

    app = FastAPI(
        title=config.title,
        description=config.description,
        version=config.version,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.expense_store = expense_store

    # Register exception handlers
    app.add_exception_handler(MissingFieldsError, missing_fields_handler)
    app.add_exception_handler(InvalidFormatError, invalid_format_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RuntimeError, runtime_error_handler)

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        """Attach the fixed CORS policy to every response, errors included."""
        try:
            response = await call_next(request)
        except Exception as exc:
            response = await generic_exception_handler(request, exc)

        response.headers.update(CORS_HEADERS)
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every incoming request and its response time."""
        start_time = datetime.now(UTC)
        logger.info("Request: %s %s", request.method, request.url)

        response = await call_next(request)

        process_time = (datetime.now(UTC) - start_time).total_seconds()
        logger.info("Response: %s - %.3fs", response.status_code, process_time)

        return response

    app.include_router(router)
    return app
