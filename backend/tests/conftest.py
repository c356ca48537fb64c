import os

import pytest
from fastapi.testclient import TestClient

# Set environment for testing
os.environ["ENVIRONMENT"] = "local"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from app_factory import AppConfig, create_app
from core.store import InMemoryExpenseStore


@pytest.fixture
def store():
    """Provide a freshly seeded store for each test."""
    return InMemoryExpenseStore.seeded()


@pytest.fixture
def app(store):
    """Build an application bound to the per-test store."""
    config = AppConfig(
        title="Expenses API (Test)",
        description="Test application",
        environment="test",
    )
    return create_app(config, store=store)


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def sample_expense_data():
    """Sample create payload for testing."""
    return {
        "amount": 12.5,
        "description": "Lunch",
        "category": "Food",
        "date": "2025-12-03",
    }
