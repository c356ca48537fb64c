import re
from datetime import date as calendar_date

from pydantic import BaseModel, ConfigDict, Field, field_validator

EXPENSES_PATH = "/api/expenses"
REQUIRED_FIELDS = ("amount", "description", "category", "date")
SUPPORTED_METHODS = ("GET", "POST")

ISO_DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


def is_valid_calendar_date(value: str) -> bool:
    """Return True when value is a real calendar date written as YYYY-MM-DD."""
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        return False
    try:
        calendar_date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _require_text(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} cannot be empty")
    return value.strip()


class Expense(BaseModel):
    """Expense entity; `id` is assigned by the store and never reused."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., gt=0, description="Store-assigned expense ID")
    amount: float = Field(..., description="Expense amount")
    description: str = Field(..., description="Expense description")
    category: str = Field(..., description="Free-form category label")
    date: str = Field(..., description="Expense date (YYYY-MM-DD)")

    @field_validator("description")
    def description_must_not_be_empty(cls, value: str) -> str:
        return _require_text(value, "Description")

    @field_validator("category")
    def category_must_not_be_empty(cls, value: str) -> str:
        return _require_text(value, "Category")

    @field_validator("date")
    def date_must_be_calendar_date(cls, value: str) -> str:
        if not is_valid_calendar_date(value):
            raise ValueError("Date must be a valid YYYY-MM-DD calendar date")
        return value


class ExpenseCreate(BaseModel):
    """Request model for creating a new expense, after coercion."""

    amount: float
    description: str
    category: str
    date: str


class ExpenseCreatedResponse(BaseModel):
    """Response body returned after a successful create."""

    message: str
    expense: Expense
