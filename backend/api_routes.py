from __future__ import annotations

import json
import logging
from datetime import datetime, UTC
from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel

from core.exceptions import InvalidFormatError
from core.models import EXPENSES_PATH, Expense, ExpenseCreatedResponse
from core.store import ExpenseStore
from services.expenses_service import CREATED_MESSAGE, ExpensesService

logger = logging.getLogger("expenses_api.api")
router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    environment: Optional[str] = None


def get_expense_store(request: Request) -> ExpenseStore:
    """Return the store the application was built with."""
    return request.app.state.expense_store


def get_expenses_service(
    store: Annotated[ExpenseStore, Depends(get_expense_store)],
) -> ExpensesService:
    return ExpensesService(store)


ExpensesServiceDep = Annotated[ExpensesService, Depends(get_expenses_service)]


async def _read_json_body(request: Request) -> Any:
    """Decode the request body; an empty body reads as an empty object."""
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError:
        raise InvalidFormatError("Request body must be valid JSON.")


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint for monitoring and validation."""
    logger.info("Health check endpoint called")

    config = getattr(request.app.state, "config", None)
    environment = getattr(config, "environment", None) if config else None
    version = getattr(config, "version", "1.0.0")

    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC).isoformat(),
        version=version,
        environment=environment,
    )


@router.get("/")
async def root(request: Request) -> Dict[str, str]:
    """Root endpoint providing service metadata."""
    config = getattr(request.app.state, "config", None)

    message = getattr(config, "root_message", "Expenses API")
    version = getattr(config, "version", "1.0.0")

    response: Dict[str, str] = {"message": message, "version": version}

    if config and getattr(config, "environment", None):
        response["environment"] = config.environment

    return response


@router.get(EXPENSES_PATH, response_model=List[Expense])
async def list_expenses(service: ExpensesServiceDep) -> List[Expense]:
    """Return all expenses in creation order, as a bare array."""
    return service.list_expenses()


@router.post(
    EXPENSES_PATH,
    response_model=ExpenseCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_expense(
    request: Request, service: ExpensesServiceDep
) -> ExpenseCreatedResponse:
    """Create a new expense from {amount, description, category, date}."""
    payload = await _read_json_body(request)
    expense = service.create_expense(payload)
    return ExpenseCreatedResponse(message=CREATED_MESSAGE, expense=expense)


@router.options(EXPENSES_PATH)
async def preflight_expenses() -> Response:
    """Acknowledge a CORS preflight; headers are added by middleware."""
    return Response(status_code=status.HTTP_200_OK)

