"""Display functions for image commands - pure functions for Rich output."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ...content import GeneratedImage


def show_image(console: Console, image: GeneratedImage) -> None:
    """Display a generated image's metadata."""
    console.print(f"[green]Image[/green] [bold]{image.id}[/bold]")
    console.print(f"  Size: {image.width}x{image.height} ({image.aspect_ratio})")
    console.print(f"  Model: [cyan]{image.model}[/cyan]")
    if image.parent_image_id:
        console.print(f"  Parent: [dim]{image.parent_image_id}[/dim]")
    if image.visual_concept_index is not None:
        console.print(f"  Thumbnail: {image.visual_concept_index + 1}")
    console.print(f"  Prompt: [dim]{image.prompt[:200]}[/dim]")


def show_images_table(console: Console, images: list[GeneratedImage]) -> None:
    if not images:
        console.print("[yellow]No images generated yet.[/yellow]")
        return

    table = Table(title="Generated Images")
    table.add_column("ID", style="dim")
    table.add_column("Size")
    table.add_column("Ratio")
    table.add_column("Upscaled")
    table.add_column("Prompt")

    for image in images:
        table.add_row(
            image.id,
            f"{image.width}x{image.height}",
            image.aspect_ratio,
            "yes" if image.is_upscaled else "",
            image.prompt[:60],
        )
    console.print(table)
