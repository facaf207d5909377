"""Rich console singleton and error output for CLI commands."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Iterator, NoReturn

import typer
from rich.console import Console

from ...errors import StudioError

# Use safe_box on Windows to avoid Unicode encoding errors
_safe_box = sys.platform == "win32"

# Global console instance - used across all CLI modules
console = Console(safe_box=_safe_box)


def print_error(message: str, details: dict | None = None) -> None:
    """Print an error message.

    Args:
        message: Error message
        details: Optional details dict
    """
    console.print(f"[red]Error: {message}[/red]")
    if details:
        for key, value in details.items():
            console.print(f"  [dim]{key}:[/dim] [yellow]{value}[/yellow]")


def print_warning(message: str) -> None:
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_success(message: str) -> None:
    console.print(f"[green]{message}[/green]")


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    print_error(message)
    raise typer.Exit(1)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn studio errors raised inside a command into a red message and exit 1."""
    try:
        yield
    except StudioError as e:
        fail(str(e))
