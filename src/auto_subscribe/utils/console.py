"""Console output helpers shared by the Lambda handlers and the CLI."""

from typing import Any

from rich.console import Console
from rich.markup import escape

# Shared console for all output. soft_wrap keeps each message on one line so
# CloudWatch Logs stores it as a single record.
console = Console(soft_wrap=True)


def success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{escape(message)}[/green]")


def error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{escape(message)}[/red]")


def warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]{escape(message)}[/yellow]")


def info(message: str) -> None:
    """Print a plain informational message."""
    console.print(message, markup=False, highlight=False)


def dim(message: str) -> None:
    """Print a dimmed/secondary message."""
    console.print(f"[dim]{escape(message)}[/dim]")


def bold(message: str) -> None:
    """Print a bold message."""
    console.print(f"[bold]{escape(message)}[/bold]")


def cancel(message: str) -> None:
    """Print a cancellation message in yellow."""
    console.print(f"[yellow]{escape(message)}[/yellow]")


def log_json(data: Any) -> None:
    """Print a JSON payload on a single line."""
    console.print_json(data=data, indent=None, default=str)
