"""Chat CLI command - one assistant turn against a project."""

from __future__ import annotations

import asyncio

import typer

from ..core import console, get_services, handle_errors
from .display import show_action_results, show_follow_ups_pending, show_reply


def chat(
    project_id: str = typer.Argument(..., help="Project ID"),
    message: str = typer.Argument(..., help="Your message to the assistant"),
    follow_ups: bool = typer.Option(
        True, "--follow-ups/--no-follow-ups", help="Run regenerate / add-more requests after the reply"
    ),
) -> None:
    """Ask the assistant to review or change the project.

    The assistant sees the project, its content, sources, reference images
    and (on the carousel step) the slides, and can edit them with tools.
    """
    assistant = get_services().assistant

    with handle_errors():
        with console.status("[bold green]Thinking..."):
            reply = asyncio.run(assistant.handle(project_id, message))

    show_reply(console, reply)
    show_action_results(console, reply.results)

    if not reply.follow_ups:
        return
    if not follow_ups:
        show_follow_ups_pending(console, reply)
        return

    with handle_errors():
        with console.status("[bold green]Generating..."):
            results = asyncio.run(assistant.run_follow_ups(project_id, reply.follow_ups))
    show_action_results(console, results, title="Follow-ups")
