"""Display functions for project commands - pure functions for Rich output."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...constants import WorkflowStep
from ...content.models import Project
from ...workflow import step_label, steps


def show_projects_table(console: Console, projects: list[Project]) -> None:
    """Display table of projects."""
    if not projects:
        console.print("[yellow]No projects found.[/yellow]")
        return

    table = Table(title="Projects")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Platform", style="green")
    table.add_column("Step", style="yellow")
    table.add_column("Status")

    for project in projects:
        table.add_row(
            project.id,
            project.name,
            project.platform.value,
            step_label(project.current_step),
            project.status.value,
        )

    console.print(table)


def format_step_indicator(project: Project, completed: list[WorkflowStep]) -> str:
    """Step bar: current step bold, completed steps green."""
    parts = []
    for step in steps(project.platform):
        label = step_label(step)
        if step == project.current_step:
            parts.append(f"[bold cyan]> {label}[/bold cyan]")
        elif step in completed:
            parts.append(f"[green]{label}[/green]")
        else:
            parts.append(f"[dim]{label}[/dim]")
    return " | ".join(parts)


def show_project(console: Console, project: Project, completed: list[WorkflowStep]) -> None:
    """Display one project with its workflow progress."""
    remix = f"\nRemix of: [dim]{project.remix_of_project_id}[/dim]" if project.remix_of_project_id else ""
    console.print(Panel(
        f"[bold]{project.name}[/bold]\n"
        f"Topic: [cyan]{project.topic}[/cyan]\n"
        f"Platform: [green]{project.platform.value}[/green]\n"
        f"Audience: {project.target_audience or '[dim]not specified[/dim]'}\n"
        f"Style: {project.content_style or '[dim]not specified[/dim]'}\n"
        f"Status: [yellow]{project.status.value}[/yellow]{remix}\n\n"
        f"{format_step_indicator(project, completed)}",
        title=f"Project {project.id}",
    ))
