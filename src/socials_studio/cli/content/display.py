"""Display functions for content commands - pure functions for Rich output."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...constants import SKIPPED, ContentType, Platform
from ...content import ContentVersion, Output, field_for, platform_sections


def show_section(console: Console, output: Output, content_type: ContentType) -> None:
    """Display one section with its selection marker and edit markers."""
    field = field_for(content_type)
    items = field.items(output)
    originals = field.originals(output)
    selected = field.selected(output)

    if field.is_scalar:
        body = items[0] if items else ""
        edited = " [yellow](edited)[/yellow]" if originals and body != originals[0] else ""
        console.print(Panel(body or "[dim]empty[/dim]", title=f"{field.label}{edited}"))
        return

    table = Table(title=field.label, show_lines=True)
    table.add_column("#", style="dim", width=3)
    table.add_column("Text")
    table.add_column("", width=10)

    for i, item in enumerate(items):
        marks = []
        if i == selected:
            marks.append("[green]selected[/green]")
        if i < len(originals) and item != originals[i]:
            marks.append("[yellow]edited[/yellow]")
        table.add_row(str(i + 1), item, "\n".join(marks))

    if not items:
        table.add_row("-", "[dim]no items[/dim]", "")
    console.print(table)
    if selected == SKIPPED:
        console.print("[dim]  (skipped)[/dim]")


def show_output(console: Console, output: Output, platform: Platform) -> None:
    """Display every section the platform uses."""
    for content_type in platform_sections(platform):
        show_section(console, output, content_type)


def show_history(console: Console, versions: list[ContentVersion]) -> None:
    """Display the edit history of one item, newest first."""
    if not versions:
        console.print("[yellow]No edits recorded.[/yellow]")
        return

    table = Table(title="Edit History")
    table.add_column("Version", style="dim")
    table.add_column("When")
    table.add_column("By", style="cyan")
    table.add_column("Before")
    table.add_column("After")

    for version in versions:
        table.add_row(
            version.id,
            version.created_at.strftime("%Y-%m-%d %H:%M"),
            version.edited_by.value,
            version.old_content[:60],
            version.new_content[:60],
        )
    console.print(table)
