"""Request validation and create/list operations for expenses."""

import logging
import math
import re
from typing import Any, List

from core.exceptions import (
    InvalidFormatError,
    MissingFieldsError,
)
from core.models import (
    REQUIRED_FIELDS,
    Expense,
    ExpenseCreate,
    is_valid_calendar_date,
)
from core.store import ExpenseStore

logger = logging.getLogger(__name__)

CREATED_MESSAGE = "Expense successfully added."

NUMERIC_TEXT_PATTERN = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def _is_numeric_text(text: str) -> bool:
    return NUMERIC_TEXT_PATTERN.fullmatch(text) is not None


def _is_zero_text(value: str) -> bool:
    text = value.strip()
    return _is_numeric_text(text) and float(text) == 0


def _is_absent(field: str, value: Any) -> bool:
    """Presence rule: None, blank text, empty containers and zero amounts are absent."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        if not value.strip():
            return True
        return field == "amount" and _is_zero_text(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, (list, dict)):
        return not value
    return False


def find_missing_fields(payload: dict) -> List[str]:
    """Return the required fields that are absent or empty, in field order."""
    return [field for field in REQUIRED_FIELDS if _is_absent(field, payload.get(field))]


def parse_amount(value: Any) -> float:
    """Coerce an amount given as text or number to a finite float."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidFormatError()
    if isinstance(value, str):
        text = value.strip()
        if not _is_numeric_text(text):
            raise InvalidFormatError()
        amount = float(text)
    else:
        try:
            amount = float(value)
        except OverflowError:
            raise InvalidFormatError()

    if not math.isfinite(amount):
        raise InvalidFormatError()
    return amount


def validate_expense_payload(payload: Any) -> ExpenseCreate:
    """Validate a create request body.

    Checks run in order and stop at the first failure:
    presence of all four fields (MissingFieldsError), then the amount and
    date formats plus text types (InvalidFormatError).
    """
    if not isinstance(payload, dict):
        raise InvalidFormatError("Request body must be a JSON object.")

    missing = find_missing_fields(payload)
    if missing:
        raise MissingFieldsError(received=payload, missing=missing)

    amount = parse_amount(payload["amount"])

    description = payload["description"]
    category = payload["category"]
    expense_date = payload["date"]
    if not isinstance(description, str) or not isinstance(category, str):
        raise InvalidFormatError(
            "Invalid data types: 'description' and 'category' must be strings."
        )
    if not is_valid_calendar_date(expense_date):
        raise InvalidFormatError()

    return ExpenseCreate(
        amount=amount,
        description=description.strip(),
        category=category.strip(),
        date=expense_date,
    )


class ExpensesService:
    """List and create expenses against an injected store."""

    def __init__(self, store: ExpenseStore):
        self.store = store

    def list_expenses(self) -> List[Expense]:
        return self.store.list()

    def create_expense(self, payload: Any) -> Expense:
        """Validate payload and append it; the store is untouched on failure."""
        expense_data = validate_expense_payload(payload)
        return self.store.add(expense_data)
