"""Content CLI commands - thin wrappers orchestrating display and service.

Item numbers on the command line start at 1, matching what is displayed.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer

from ...constants import NO_SELECTION, ContentType
from ...content import export_markdown
from ..core import console, get_services, handle_errors, print_success
from .display import show_history, show_output, show_section

content_app = typer.Typer(help="Generate, select and edit project content.", no_args_is_help=True)


@content_app.command("generate")
def generate(
    project_id: str = typer.Argument(..., help="Project ID"),
    section: Optional[ContentType] = typer.Option(None, "--section", "-s", help="Regenerate only this section"),
    more: bool = typer.Option(False, "--more", help="Add options to --section instead of replacing it"),
) -> None:
    """Generate all content, or regenerate / extend one section."""
    services = get_services()
    with handle_errors():
        project = services.projects.get(project_id)
        with console.status("[bold green]Generating content..."):
            if section is None:
                output = asyncio.run(services.outputs.generate(project_id))
            elif more:
                output = asyncio.run(services.outputs.add_more(project_id, section))
            else:
                output = asyncio.run(services.outputs.regenerate_section(project_id, section))

    if section is None:
        show_output(console, output, project.platform)
    else:
        show_section(console, output, section)


@content_app.command("show")
def show(project_id: str = typer.Argument(..., help="Project ID")) -> None:
    """Show the project's current content."""
    services = get_services()
    with handle_errors():
        project = services.projects.get(project_id)
        output = services.outputs.require(project_id)
    show_output(console, output, project.platform)


@content_app.command("select")
def select(
    project_id: str = typer.Argument(..., help="Project ID"),
    section: ContentType = typer.Argument(..., help="Content section"),
    number: int = typer.Argument(0, help="Item number (0 clears the selection)"),
) -> None:
    """Select an item for a section."""
    index = number - 1 if number > 0 else NO_SELECTION
    with handle_errors():
        output = get_services().outputs.update_selection(project_id, section, index)
    show_section(console, output, section)


@content_app.command("skip")
def skip(
    project_id: str = typer.Argument(..., help="Project ID"),
    section: ContentType = typer.Argument(ContentType.CTA, help="Content section (only cta)"),
) -> None:
    """Mark a section as deliberately skipped."""
    with handle_errors():
        get_services().outputs.skip(project_id, section)
    print_success(f"Skipped {section.value}")


@content_app.command("edit")
def edit(
    project_id: str = typer.Argument(..., help="Project ID"),
    section: ContentType = typer.Argument(..., help="Content section"),
    number: int = typer.Argument(..., help="Item number"),
    text: str = typer.Argument(..., help="New text"),
) -> None:
    """Rewrite one item. The previous text is kept in its history."""
    with handle_errors():
        output = get_services().outputs.edit_item(project_id, section, number - 1, text)
    show_section(console, output, section)


@content_app.command("remove")
def remove(
    project_id: str = typer.Argument(..., help="Project ID"),
    section: ContentType = typer.Argument(..., help="Content section"),
    number: int = typer.Argument(..., help="Item number"),
) -> None:
    """Remove one item."""
    with handle_errors():
        output = get_services().outputs.remove_item(project_id, section, number - 1)
    show_section(console, output, section)


@content_app.command("revert")
def revert(
    project_id: str = typer.Argument(..., help="Project ID"),
    section: ContentType = typer.Argument(..., help="Content section"),
    number: int = typer.Argument(..., help="Item number"),
) -> None:
    """Restore an item to its originally generated text."""
    with handle_errors():
        output = get_services().outputs.revert(project_id, section, number - 1)
    show_section(console, output, section)


@content_app.command("history")
def history(
    project_id: str = typer.Argument(..., help="Project ID"),
    section: ContentType = typer.Argument(..., help="Content section"),
    number: int = typer.Argument(..., help="Item number"),
    restore: Optional[str] = typer.Option(None, "--restore", help="Version ID to restore"),
) -> None:
    """Show an item's edit history, or restore a version."""
    services = get_services()
    with handle_errors():
        if restore:
            output = services.outputs.restore_version(project_id, restore)
            show_section(console, output, section)
            return
        versions = services.outputs.history(project_id, section, number - 1)
    show_history(console, versions)


@content_app.command("export")
def export(
    project_id: str = typer.Argument(..., help="Project ID"),
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Write Markdown to this file"),
) -> None:
    """Export the content as Markdown."""
    services = get_services()
    with handle_errors():
        project = services.projects.get(project_id)
        markdown = export_markdown(project, services.outputs.require(project_id))

    if output_path is None:
        console.print(markdown, markup=False, highlight=False)
        return
    output_path.write_text(markdown, encoding="utf-8")
    print_success(f"Exported to {output_path}")
