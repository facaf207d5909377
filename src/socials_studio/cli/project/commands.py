"""Project CLI commands - thin wrappers orchestrating display and service."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional

import typer

from ...constants import Platform, SourceType, WorkflowStep
from ..core import console, fail, get_services, handle_errors, print_success
from .display import show_project, show_projects_table

project_app = typer.Typer(help="Create, inspect and navigate projects.", no_args_is_help=True)


@project_app.command("create")
def create_project(
    name: str = typer.Argument(..., help="Project name"),
    topic: str = typer.Option(..., "--topic", "-t", help="What the content is about"),
    platform: Platform = typer.Option(Platform.LINKEDIN, "--platform", "-p", help="Target platform"),
    audience: Optional[str] = typer.Option(None, "--audience", "-a", help="Target audience"),
    style: Optional[str] = typer.Option(None, "--style", "-s", help="Content style"),
) -> None:
    """Create a new project."""
    services = get_services()
    project = services.projects.create(name, topic, platform, audience, style)
    print_success(f"Created project {project.id}")
    show_project(console, project, [])


@project_app.command("list")
def list_projects() -> None:
    """List all projects."""
    show_projects_table(console, get_services().projects.list_projects())


@project_app.command("show")
def show(project_id: str = typer.Argument(..., help="Project ID")) -> None:
    """Show a project and its workflow progress."""
    services = get_services()
    with handle_errors():
        project = services.projects.get(project_id)
        completed = services.outputs.completed_steps(project_id)
    show_project(console, project, completed)


@project_app.command("delete")
def delete(
    project_id: str = typer.Argument(..., help="Project ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a project with all its content, images and messages."""
    if not yes:
        typer.confirm(f"Delete project {project_id} and everything it contains?", abort=True)
    if not get_services().projects.delete(project_id):
        fail(f"Project not found: {project_id}")
    print_success(f"Deleted project {project_id}")


@project_app.command("duplicate")
def duplicate(project_id: str = typer.Argument(..., help="Project ID to copy")) -> None:
    """Copy a project and its content as a new remix."""
    services = get_services()
    with handle_errors():
        copy = services.projects.duplicate(project_id)
    print_success(f"Created remix {copy.id}")
    show_project(console, copy, services.outputs.completed_steps(copy.id))


@project_app.command("step")
def step(
    project_id: str = typer.Argument(..., help="Project ID"),
    to: Optional[WorkflowStep] = typer.Option(None, "--to", help="Jump to this step"),
    back: bool = typer.Option(False, "--back", help="Go to the previous step"),
) -> None:
    """Move to the next workflow step (or back, or to a given step)."""
    services = get_services()
    with handle_errors():
        if to is not None:
            project = services.projects.set_step(project_id, to)
        elif back:
            project = services.projects.back(project_id)
        else:
            project = services.projects.advance(project_id)
        completed = services.outputs.completed_steps(project_id)
    show_project(console, project, completed)


@project_app.command("add-source")
def add_source(
    project_id: str = typer.Argument(..., help="Project ID"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Text or Markdown file"),
    title: Optional[str] = typer.Option(None, "--title", help="Source title (default: file name)"),
) -> None:
    """Attach research material the assistant can read."""
    services = get_services()
    with handle_errors():
        source = services.projects.add_source(
            project_id, title or file.stem, file.read_text(encoding="utf-8"), SourceType.FILE
        )
    print_success(f"Added source {source.id} ({len(source.content)} chars)")


@project_app.command("add-asset")
def add_asset(
    project_id: str = typer.Argument(..., help="Project ID"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Reference image"),
) -> None:
    """Attach a reference image (logo, brand photo)."""
    services = get_services()
    mime_type = mimetypes.guess_type(file.name)[0] or "image/png"
    with handle_errors():
        asset = services.projects.add_asset(project_id, file.name, file.read_bytes(), mime_type)
    print_success(f"Added asset {asset.id}")
