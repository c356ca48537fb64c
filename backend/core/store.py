"""Expense storage.

The store is injected into the application so the caller decides its lifecycle.
The default in-memory store lives as long as the hosting process: a cold start
on Lambda discards every expense added since the last one.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Iterable, List

from core.models import Expense, ExpenseCreate

logger = logging.getLogger(__name__)


SEED_EXPENSES: List[dict] = [
    {
        "id": 1,
        "amount": 50.00,
        "description": "Groceries for the week",
        "category": "Food",
        "date": "2025-12-01",
    },
    {
        "id": 2,
        "amount": 15.50,
        "description": "Bus fare",
        "category": "Transportation",
        "date": "2025-12-02",
    },
]


class ExpenseStore(ABC):
    """Ordered collection of expenses with store-assigned identifiers."""

    @abstractmethod
    def list(self) -> List[Expense]:
        """Return every expense in creation order."""

    @abstractmethod
    def add(self, expense_data: ExpenseCreate) -> Expense:
        """Assign the next ID to expense_data, append it and return the record."""


class InMemoryExpenseStore(ExpenseStore):
    """Process-local store backed by a list and a next-id counter."""

    def __init__(self, expenses: Iterable[Expense] = ()):
        self._expenses: List[Expense] = list(expenses)
        ids = [expense.id for expense in self._expenses]
        if len(ids) != len(set(ids)):
            raise ValueError("Expense IDs must be unique")
        self._next_id = max(ids, default=0) + 1

    @classmethod
    def seeded(cls) -> "InMemoryExpenseStore":
        """Build a store holding the two example expenses (next ID is 3)."""
        return cls(Expense(**item) for item in SEED_EXPENSES)

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._expenses)

    def list(self) -> List[Expense]:
        return list(self._expenses)

    def add(self, expense_data: ExpenseCreate) -> Expense:
        expense = Expense(id=self._next_id, **expense_data.model_dump())
        self._expenses.append(expense)
        self._next_id += 1
        logger.info(f"Created expense {expense.id}: {expense.description}")
        return expense


def seed_enabled() -> bool:
    """Read EXPENSES_SEED; anything but an explicit false value seeds the store."""
    return os.getenv("EXPENSES_SEED", "true").strip().lower() not in {
        "0",
        "false",
        "no",
        "off",
    }


def create_default_store() -> ExpenseStore:
    """Build the store used when the application is not given one."""
    if seed_enabled():
        return InMemoryExpenseStore.seeded()
    logger.info("EXPENSES_SEED disabled; starting with an empty expense store")
    return InMemoryExpenseStore()
