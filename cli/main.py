import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import requests
import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

load_dotenv()

console = Console()

EXPENSES_PATH = "/api/expenses"
REQUIRED_SEED_KEYS = ("amount", "description", "category", "date")


def load_seed_yaml(seed_file: Optional[str] = None) -> List[Dict[str, Any]]:
    """Load expenses to seed from a YAML file.

    Args:
        seed_file: Optional path to custom seed file. If None, uses default seed_data.yaml

    Returns:
        List of expense dicts with keys: amount, description, category, date

    Raises:
        FileNotFoundError: If seed file doesn't exist
        ValueError: If an entry is missing required keys
        yaml.YAMLError: If YAML file is malformed
    """
    if seed_file:
        yaml_path = Path(seed_file)
    else:
        # Default: look for seed_data.yaml in the same directory as this script
        script_dir = Path(__file__).parent
        yaml_path = script_dir / "seed_data.yaml"

    if not yaml_path.exists():
        raise FileNotFoundError(
            f"Seed file not found: {yaml_path}\n"
            f"Please ensure seed_data.yaml exists or specify a custom file with --seed-file"
        )

    try:
        with open(yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        console.print(f"[red]Error parsing YAML file: {e}[/red]")
        raise

    expenses = data.get("expenses") if isinstance(data, dict) else None
    if not isinstance(expenses, list):
        raise ValueError("Seed file must contain an 'expenses' list")

    for index, item in enumerate(expenses):
        if not isinstance(item, dict):
            raise ValueError(f"Seed expense #{index + 1} must be a mapping")
        missing_keys = [key for key in REQUIRED_SEED_KEYS if key not in item]
        if missing_keys:
            raise ValueError(
                f"Seed expense #{index + 1} missing required keys: {missing_keys}. "
                f"Expected keys: {list(REQUIRED_SEED_KEYS)}"
            )
        # YAML reads unquoted dates as datetime.date
        item["date"] = str(item["date"])

    return expenses


class ExpensesApiClient:
    def __init__(self):
        self.api_endpoint = os.getenv("API_ENDPOINT")

        if not self.api_endpoint:
            console.print("[red]Error: Missing required environment variable[/red]")
            console.print("Required: API_ENDPOINT")
            sys.exit(1)

    def make_request(self, method: str, path: str, **kwargs) -> Optional[Any]:
        """Make a request to the API.

        Args:
            method: HTTP method
            path: API path
            **kwargs: Additional arguments for requests
        """
        url = f"{self.api_endpoint.rstrip('/')}{path}"

        try:
            response = requests.request(method, url, timeout=30, **kwargs)
            response.raise_for_status()

            if response.headers.get("content-type", "").startswith("application/json"):
                return response.json()
            return {"message": response.text}

        except requests.exceptions.HTTPError as e:
            console.print(
                f"[red]HTTP Error {e.response.status_code}: "
                f"{_error_message(e.response)}[/red]"
            )
            return None
        except requests.exceptions.RequestException as e:
            console.print(f"[red]Error: {str(e)}[/red]")
            return None

    def health_check(self) -> bool:
        """Check API health status."""
        console.print(f"Checking API health status... Endpoint {self.api_endpoint}")
        result = self.make_request("GET", "/health")
        if result:
            table = Table(title="API Health Check")
            table.add_column("Field", style="cyan")
            table.add_column("Value", style="magenta")

            table.add_row("Status", result.get("status", "unknown"))
            table.add_row("Timestamp", result.get("timestamp", "unknown"))
            table.add_row("Version", result.get("version", "unknown"))

            console.print(table)
            return result.get("status") == "healthy"
        return False


def _error_message(response: requests.Response) -> str:
    """Pull the `error` string out of an API error body, else the raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("error"):
        return body["error"]
    return response.text


def format_amount(amount: Any) -> str:
    return f"${float(amount):.2f}"


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """Expenses CLI - list and add expenses on an Expenses API deployment."""
    pass


@cli.command()
def health():
    """Check API health status."""
    client = ExpensesApiClient()
    if client.health_check():
        console.print("[green]✓ API is healthy[/green]")
    else:
        console.print("[red]✗ API health check failed[/red]")
        sys.exit(1)


@cli.group()
def expenses():
    """Expense commands."""
    pass


@expenses.command("add")
@click.option("--amount", required=True, help="Expense amount, e.g. 12.50")
@click.option("--description", required=True, help="Expense description")
@click.option("--category", required=True, help="Category label")
@click.option("--date", required=True, help="Expense date (YYYY-MM-DD)")
def add_expense(amount: str, description: str, category: str, date: str):
    """Add a new expense. The API validates and coerces every field."""
    client = ExpensesApiClient()

    expense_data = {
        "amount": amount,
        "description": description,
        "category": category,
        "date": date,
    }

    result = client.make_request("POST", EXPENSES_PATH, json=expense_data)
    if result:
        expense = result["expense"]
        console.print(f"[green]✓ {result['message']}[/green]")
        console.print(f"ID: {expense['id']}")
        console.print(f"Description: {expense['description']}")
        console.print(f"Amount: {format_amount(expense['amount'])}")
        console.print(f"Category: {expense['category']}")
        console.print(f"Date: {expense['date']}")
    else:
        console.print("[red]✗ Failed to add expense[/red]")
        sys.exit(1)


@expenses.command("list")
@click.option("--limit", type=int, default=20, help="Limit number of results")
def list_expenses(limit: int):
    """List expenses in the order they were created."""
    client = ExpensesApiClient()

    result = client.make_request("GET", EXPENSES_PATH)
    if result is not None:
        if not result:
            console.print("No expenses found")
            return

        # Limit results for display
        expenses_to_show = result[:limit] if len(result) > limit else result

        table = Table(title=f"Expenses ({len(expenses_to_show)}/{len(result)} shown)")
        table.add_column("ID", style="cyan")
        table.add_column("Date", style="yellow")
        table.add_column("Description", style="white", max_width=30)
        table.add_column("Amount", style="green", justify="right")
        table.add_column("Category", style="magenta")

        for expense in expenses_to_show:
            description = (
                expense["description"][:27] + "..."
                if len(expense["description"]) > 30
                else expense["description"]
            )
            table.add_row(
                str(expense["id"]),
                expense["date"],
                description,
                format_amount(expense["amount"]),
                expense["category"],
            )

        console.print(table)

        total = sum(float(expense["amount"]) for expense in result)
        console.print(f"Total: {format_amount(total)}")

        if len(result) > limit:
            console.print(
                f"[yellow]Showing {limit} of {len(result)} expenses. Use --limit to show more.[/yellow]"
            )
    else:
        console.print("[red]✗ Failed to retrieve expenses[/red]")
        sys.exit(1)


@expenses.command("seed")
@click.option(
    "--seed-file",
    type=click.Path(dir_okay=False),
    help="YAML file with an 'expenses' list (default: seed_data.yaml next to this script)",
)
def seed_expenses(seed_file: Optional[str]):
    """Add every expense listed in a YAML seed file."""
    try:
        seed_data = load_seed_yaml(seed_file)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    client = ExpensesApiClient()
    console.print(f"[bold]Seeding {len(seed_data)} expenses[/bold]")

    created_count = 0
    failed_count = 0
    for item in seed_data:
        result = client.make_request("POST", EXPENSES_PATH, json=item)
        if result:
            expense = result["expense"]
            console.print(f"  [green]✓ #{expense['id']} {expense['description']}[/green]")
            created_count += 1
        else:
            console.print(f"  [dim]- {item['description']} (rejected)[/dim]")
            failed_count += 1

    console.print(
        f"[blue]{created_count} created, {failed_count} failed[/blue]"
    )
    if failed_count:
        sys.exit(1)


if __name__ == "__main__":
    cli()
