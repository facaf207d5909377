"""Display functions for carousel commands - pure functions for Rich output."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ...carousel import CarouselOutput, CarouselTemplate


def show_carousel(console: Console, carousel: CarouselOutput) -> None:
    """Display carousel slides."""
    template = f" (template {carousel.template_id})" if carousel.template_id else ""
    table = Table(title=f"Carousel{template}", show_lines=True)
    table.add_column("#", style="dim", width=3)
    table.add_column("Headline", style="bold")
    table.add_column("Body")
    table.add_column("CTA", style="green")
    table.add_column("Image", style="dim")

    for slide in carousel.slides:
        table.add_row(
            str(slide.position + 1),
            slide.headline,
            slide.body or "",
            slide.cta or "",
            slide.image_id or "",
        )
    console.print(table)


def show_template_imported(console: Console, template: CarouselTemplate) -> None:
    console.print(
        f"[green]Imported template[/green] [bold]{template.name}[/bold] "
        f"[dim]({template.id})[/dim] with {template.slide_count} slide(s)"
    )
