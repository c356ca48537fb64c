"""Centralized exception handlers for FastAPI application."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import (
    InvalidFormatError,
    MethodNotAllowedError,
    MissingFieldsError,
)
from core.models import EXPENSES_PATH

logger = logging.getLogger(__name__)


async def missing_fields_handler(
    request: Request, exc: MissingFieldsError
) -> JSONResponse:
    """Handle MissingFieldsError, echoing the received body back."""
    logger.warning(
        f"{exc.kind} on {request.url.path}: missing {', '.join(exc.missing)}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message, "received": exc.received},
    )


async def invalid_format_handler(
    request: Request, exc: InvalidFormatError
) -> JSONResponse:
    logger.warning(f"{exc.kind} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message},
    )


async def method_not_allowed_handler(
    request: Request, exc: MethodNotAllowedError
) -> JSONResponse:
    logger.warning(f"{exc.kind} on {request.url.path}: {exc.method}")
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={"error": exc.message},
        headers={"Allow": ", ".join(exc.allowed)},
    )


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Handle remaining ValueError exceptions (model validation errors)."""
    logger.warning(f"ValueError on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": str(exc)},
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render routing errors as {error}.

    A 405 on the expenses route is reported as MethodNotAllowed, whatever the
    method, so the body names it and `Allow` lists GET and POST only.
    """
    if (
        exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        and request.url.path == EXPENSES_PATH
    ):
        return await method_not_allowed_handler(
            request, MethodNotAllowedError(request.method)
        )

    logger.warning(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def runtime_error_handler(request: Request, exc: RuntimeError) -> JSONResponse:
    """Handle RuntimeError exceptions (store errors, system errors)."""
    logger.error(f"RuntimeError on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unexpected error on {request.url.path}: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An unexpected error occurred"},
    )
