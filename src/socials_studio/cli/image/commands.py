"""Image CLI commands - thin wrappers orchestrating display and service."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer

from ...constants import DEFAULT_ASPECT_RATIO
from ...content import GeneratedImage
from ..core import console, get_services, handle_errors, print_success
from .display import show_image, show_images_table

image_app = typer.Typer(help="Generate and refine images.", no_args_is_help=True)


def _save(image: GeneratedImage, output_path: Optional[Path]) -> None:
    if output_path is None or not image.image_bytes:
        return
    output_path.write_bytes(image.image_bytes)
    print_success(f"Saved to {output_path}")


@image_app.command("generate")
def generate(
    project_id: str = typer.Argument(..., help="Project ID"),
    prompt: str = typer.Argument(..., help="Image prompt"),
    aspect: str = typer.Option(DEFAULT_ASPECT_RATIO, "--aspect", "-a", help="Aspect ratio (1:1, 16:9, 9:16, 4:3)"),
    references: bool = typer.Option(False, "--references", "-r", help="Use the project's reference images"),
    thumbnail: Optional[int] = typer.Option(None, "--thumbnail", help="Thumbnail slot (1 = first visual concept)"),
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Also save the image here"),
) -> None:
    """Generate an image, optionally for a thumbnail slot."""
    images = get_services().images
    with handle_errors():
        with console.status("[bold green]Generating image..."):
            if thumbnail is not None:
                image = asyncio.run(images.generate_thumbnail(
                    project_id, prompt, thumbnail, use_references=references, aspect_ratio=aspect
                ))
            else:
                image = asyncio.run(images.generate_image(
                    project_id, prompt, use_references=references, aspect_ratio=aspect
                ))
    show_image(console, image)
    _save(image, output_path)


@image_app.command("refine")
def refine(
    project_id: str = typer.Argument(..., help="Project ID"),
    image_id: str = typer.Argument(..., help="Image to refine"),
    refinement: str = typer.Argument(..., help="What to change"),
    references: bool = typer.Option(False, "--references", "-r", help="Use the project's reference images"),
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Also save the image here"),
) -> None:
    """Create a refined version of an existing image."""
    with handle_errors():
        with console.status("[bold green]Refining image..."):
            image = asyncio.run(get_services().images.refine_image(
                project_id, image_id, refinement, use_references=references
            ))
    show_image(console, image)
    _save(image, output_path)


@image_app.command("upscale")
def upscale(
    project_id: str = typer.Argument(..., help="Project ID"),
    image_id: str = typer.Argument(..., help="Image to upscale"),
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Also save the image here"),
) -> None:
    """Regenerate an image at high resolution (16:9).

    This is not super-resolution: the image is generated again from its
    prompt with quality qualifiers, so details can differ from the original.
    """
    with handle_errors():
        with console.status("[bold green]Upscaling image..."):
            image = asyncio.run(get_services().images.upscale_image(project_id, image_id))
    show_image(console, image)
    _save(image, output_path)


@image_app.command("list")
def list_images(project_id: str = typer.Argument(..., help="Project ID")) -> None:
    """List a project's generated images."""
    show_images_table(console, get_services().images.list_images(project_id))
