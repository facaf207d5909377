"""Carousel CLI commands - thin wrappers orchestrating display and service."""

from __future__ import annotations

import asyncio
import mimetypes
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from ...carousel import CarouselRenderer, TemplateFile
from ...constants import DEFAULT_SLIDE_COUNT
from ...utils import sanitize_filename
from ..core import console, fail, get_services, handle_errors, print_success
from .display import show_carousel, show_template_imported

carousel_app = typer.Typer(help="Build, edit and export carousels.", no_args_is_help=True)


class ExportFormat(str, Enum):
    PDF = "pdf"
    ZIP = "zip"


@carousel_app.command("import-template")
def import_template(
    name: str = typer.Argument(..., help="Template name"),
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="PDF, ZIP or image files"),
) -> None:
    """Import slide backgrounds from PDF, ZIP or image files."""
    uploads = [
        TemplateFile(filename=path.name, data=path.read_bytes(), mime_type=mimetypes.guess_type(path.name)[0])
        for path in files
    ]
    with handle_errors():
        template = get_services().carousels.import_template(name, uploads)
    show_template_imported(console, template)


@carousel_app.command("generate")
def generate(
    project_id: str = typer.Argument(..., help="Project ID"),
    slides: int = typer.Option(DEFAULT_SLIDE_COUNT, "--slides", "-n", min=1, help="Number of slides"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Template ID"),
    source: Optional[Path] = typer.Option(
        None, "--source", exists=True, dir_okay=False, help="Build slides from this text file instead of the body"
    ),
) -> None:
    """Generate carousel slides from the project's body content."""
    services = get_services()
    source_content = source.read_text(encoding="utf-8") if source else None
    with handle_errors():
        with console.status("[bold green]Generating slides..."):
            carousel = asyncio.run(
                services.carousels.generate(project_id, slides, source_content, template)
            )
    show_carousel(console, carousel)


@carousel_app.command("show")
def show(project_id: str = typer.Argument(..., help="Project ID")) -> None:
    """Show the project's carousel."""
    with handle_errors():
        carousel = get_services().carousels.require(project_id)
    show_carousel(console, carousel)


@carousel_app.command("export")
def export(
    project_id: str = typer.Argument(..., help="Project ID"),
    fmt: ExportFormat = typer.Option(ExportFormat.PDF, "--format", "-f", help="pdf or zip (PNG slides)"),
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file"),
) -> None:
    """Render the carousel and export it as a PDF or a ZIP of PNGs."""
    services = get_services()
    renderer = CarouselRenderer(fonts_dir=services.settings.fonts_dir)
    with handle_errors():
        project = services.projects.get(project_id)
        rendered = services.carousels.render(project_id, renderer)
    if not rendered:
        fail("Carousel has no slides")

    if fmt == ExportFormat.PDF:
        data = renderer.export_pdf(rendered)
    else:
        data = renderer.export_png_zip(rendered)

    path = output_path or Path(f"{sanitize_filename(project.name)}-carousel.{fmt.value}")
    path.write_bytes(data)
    print_success(f"Exported {len(rendered)} slide(s) to {path}")
