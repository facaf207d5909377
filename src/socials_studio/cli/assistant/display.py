"""Display functions for the chat command - pure functions for Rich output."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...assistant import AssistantReply
from ...tools import ActionResult


def show_reply(console: Console, reply: AssistantReply) -> None:
    """Display the assistant's message."""
    console.print(Panel(reply.message, title="Assistant", border_style="cyan"))


def show_action_results(console: Console, results: list[ActionResult], title: str = "Actions") -> None:
    """Display one row per applied action."""
    if not results:
        return

    table = Table(title=title)
    table.add_column("Action", style="cyan")
    table.add_column("Result")
    table.add_column("Time", style="dim", justify="right")

    for result in results:
        status = "[green]ok[/green]" if result.success else f"[red]{result.error}[/red]"
        table.add_row(result.action, status, f"{result.duration_ms}ms")
    console.print(table)


def show_follow_ups_pending(console: Console, reply: AssistantReply) -> None:
    names = ", ".join(f"{action.type} ({action.content_type.value})" for action in reply.follow_ups)
    console.print(f"[yellow]Not run:[/yellow] {names}")
