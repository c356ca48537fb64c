"""Domain exceptions raised while handling expense requests."""

from typing import Any, Iterable, Optional

from core.models import SUPPORTED_METHODS


class ExpenseError(Exception):
    """Base class for errors reported back to the caller."""

    kind = "ExpenseError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFieldsError(ExpenseError, ValueError):
    """Raised when one or more required fields are absent or empty."""

    kind = "MissingFields"

    def __init__(self, received: Any, missing: Optional[Iterable[str]] = None):
        super().__init__(
            "Missing required fields: amount, description, category, and date "
            "are all necessary."
        )
        self.received = received
        self.missing = list(missing or [])


class InvalidFormatError(ExpenseError, ValueError):
    """Raised when a field is present but cannot be interpreted."""

    kind = "InvalidFormat"

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "Invalid data types: 'amount' must be a number and 'date' must be "
            "a valid date string."
        )


class MethodNotAllowedError(ExpenseError):
    """Raised for any method the expenses route does not serve."""

    kind = "MethodNotAllowed"

    def __init__(self, method: str):
        super().__init__(
            f"Method {method} Not Allowed. Only GET and POST are supported."
        )
        self.method = method
        self.allowed = SUPPORTED_METHODS
