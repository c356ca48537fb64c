import os
import sys

import pytest
import requests
from click.testing import CliRunner

# Ensure project root is importable when running tests from cli/
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from cli.main import cli, ExpensesApiClient, load_seed_yaml  # noqa: E402


SEED_EXPENSES = [
    {
        "id": 1,
        "amount": 50.0,
        "description": "Groceries for the week",
        "category": "Food",
        "date": "2025-12-01",
    },
    {
        "id": 2,
        "amount": 15.5,
        "description": "Bus fare",
        "category": "Transportation",
        "date": "2025-12-02",
    },
]


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def api_endpoint(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("API_ENDPOINT", "http://localhost:8000")


def test_health_positive(runner: CliRunner, monkeypatch: pytest.MonkeyPatch):
    # Arrange: make health_check return True
    def fake_health_check(self: ExpensesApiClient) -> bool:  # type: ignore[override]
        return True

    monkeypatch.setattr(ExpensesApiClient, "health_check", fake_health_check)

    # Act
    result = runner.invoke(cli, ["health"])

    # Assert
    assert result.exit_code == 0, result.output
    assert "API is healthy" in result.output


def test_health_negative(runner: CliRunner, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(ExpensesApiClient, "make_request", lambda self, *a, **k: None)

    result = runner.invoke(cli, ["health"])

    assert result.exit_code == 1
    assert "API health check failed" in result.output


def test_missing_endpoint_exits(runner: CliRunner, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("API_ENDPOINT")

    result = runner.invoke(cli, ["expenses", "list"])

    assert result.exit_code == 1
    assert "API_ENDPOINT" in result.output


def test_expenses_list_positive(runner: CliRunner, monkeypatch: pytest.MonkeyPatch):
    # Arrange: return the two seed expenses
    def fake_make_request(self: ExpensesApiClient, method: str, path: str, **kwargs):
        assert method == "GET" and path == "/api/expenses"
        return SEED_EXPENSES

    monkeypatch.setattr(ExpensesApiClient, "make_request", fake_make_request)

    # Act
    result = runner.invoke(cli, ["expenses", "list"])

    # Assert
    assert result.exit_code == 0, result.output
    assert "Expenses (2/2 shown)" in result.output
    assert "Groceries for the week" in result.output
    assert "$15.50" in result.output
    assert "Total: $65.50" in result.output


def test_expenses_list_respects_limit(runner: CliRunner, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(
        ExpensesApiClient, "make_request", lambda self, *a, **k: SEED_EXPENSES
    )

    result = runner.invoke(cli, ["expenses", "list", "--limit", "1"])

    assert result.exit_code == 0, result.output
    assert "Expenses (1/2 shown)" in result.output
    assert "Showing 1 of 2 expenses" in result.output


def test_expenses_list_empty(runner: CliRunner, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(ExpensesApiClient, "make_request", lambda self, *a, **k: [])

    result = runner.invoke(cli, ["expenses", "list"])

    assert result.exit_code == 0
    assert "No expenses found" in result.output


def test_expenses_add_positive(runner: CliRunner, monkeypatch: pytest.MonkeyPatch):
    captured = {}

    def fake_make_request(self: ExpensesApiClient, method: str, path: str, **kwargs):
        assert method == "POST" and path == "/api/expenses"
        captured.update(kwargs["json"])
        return {
            "message": "Expense successfully added.",
            "expense": {"id": 3, **kwargs["json"], "amount": 12.5},
        }

    monkeypatch.setattr(ExpensesApiClient, "make_request", fake_make_request)

    result = runner.invoke(
        cli,
        [
            "expenses",
            "add",
            "--amount",
            "12.50",
            "--description",
            "Lunch",
            "--category",
            "Food",
            "--date",
            "2025-12-03",
        ],
    )

    assert result.exit_code == 0, result.output
    assert captured == {
        "amount": "12.50",
        "description": "Lunch",
        "category": "Food",
        "date": "2025-12-03",
    }
    assert "Expense successfully added." in result.output
    assert "ID: 3" in result.output
    assert "Amount: $12.50" in result.output


def test_expenses_add_rejected(runner: CliRunner, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(ExpensesApiClient, "make_request", lambda self, *a, **k: None)

    result = runner.invoke(
        cli,
        [
            "expenses",
            "add",
            "--amount",
            "abc",
            "--description",
            "Lunch",
            "--category",
            "Food",
            "--date",
            "2025-12-03",
        ],
    )

    assert result.exit_code == 1
    assert "Failed to add expense" in result.output


def test_expenses_add_prints_server_error(
    runner: CliRunner, monkeypatch: pytest.MonkeyPatch
):
    # Arrange: the API answers 400 with an {"error": ...} body
    def fake_request(method: str, url: str, **kwargs) -> requests.Response:
        assert method == "POST" and url == "http://localhost:8000/api/expenses"
        response = requests.Response()
        response.status_code = 400
        response.url = url
        response.headers["Content-Type"] = "application/json"
        response._content = b'{"error": "Invalid data types: amount must be a number"}'
        return response

    monkeypatch.setattr(requests, "request", fake_request)

    # Act
    result = runner.invoke(
        cli,
        [
            "expenses",
            "add",
            "--amount",
            "abc",
            "--description",
            "Lunch",
            "--category",
            "Food",
            "--date",
            "2025-12-03",
        ],
    )

    # Assert
    assert result.exit_code == 1
    assert "HTTP Error 400: Invalid data types: amount must be a number" in result.output
    assert "Failed to add expense" in result.output


class TestSeed:
    def test_load_default_seed_file(self):
        expenses = load_seed_yaml()

        assert len(expenses) == 3
        assert all(isinstance(item["date"], str) for item in expenses)

    def test_load_seed_file_missing_keys(self, tmp_path):
        seed_file = tmp_path / "seed.yaml"
        seed_file.write_text("expenses:\n  - amount: 5\n    description: Tea\n")

        with pytest.raises(ValueError, match="missing required keys"):
            load_seed_yaml(str(seed_file))

    def test_load_seed_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_seed_yaml(str(tmp_path / "absent.yaml"))

    def test_seed_command_posts_each_expense(
        self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch, tmp_path
    ):
        seed_file = tmp_path / "seed.yaml"
        seed_file.write_text(
            "expenses:\n"
            "  - amount: 5\n"
            "    description: Tea\n"
            "    category: Food\n"
            "    date: 2025-12-03\n"
            "  - amount: 0\n"
            "    description: Free sample\n"
            "    category: Food\n"
            "    date: 2025-12-04\n"
        )
        posted = []

        def fake_make_request(self: ExpensesApiClient, method: str, path: str, **kwargs):
            posted.append(kwargs["json"])
            if not kwargs["json"]["amount"]:
                return None
            return {
                "message": "Expense successfully added.",
                "expense": {"id": 3, **kwargs["json"]},
            }

        monkeypatch.setattr(ExpensesApiClient, "make_request", fake_make_request)

        result = runner.invoke(cli, ["expenses", "seed", "--seed-file", str(seed_file)])

        assert result.exit_code == 1
        assert posted[0]["date"] == "2025-12-03"
        assert "1 created, 1 failed" in result.output
