"""Carousel rendering and export with Pillow.

Slides are drawn on a 1080x1080 canvas: the background (attached image or
template slide, else white) is cover-fitted, then each text zone gets the
matching slide text, word-wrapped and vertically centered inside the zone.
Slides without zones use a default headline/body layout.
"""

from __future__ import annotations

import zipfile
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from ..constants import CANVAS_SIZE, TextZoneType
from .models import Slide, TextZone


def default_zones(size: int = CANVAS_SIZE) -> list[TextZone]:
    """Layout used when a slide has no template zones."""
    return [
        TextZone(
            id="default-headline", type=TextZoneType.HEADLINE,
            x=80, y=size / 2 - 100, width=size - 160, height=150,
            fontSize=72, fontWeight="bold", color="#1a1a1a", textAlign="center",
        ),
        TextZone(
            id="default-body", type=TextZoneType.BODY,
            x=80, y=size / 2 + 80, width=size - 160, height=200,
            fontSize=36, fontWeight="normal", color="#4a4a4a", textAlign="center",
        ),
        TextZone(
            id="default-cta", type=TextZoneType.CTA,
            x=80, y=size - 200, width=size - 160, height=100,
            fontSize=40, fontWeight="bold", color="#1a1a1a", textAlign="center",
        ),
    ]


class CarouselRenderer:
    """Render carousel slides to PNG and export them.

    Usage:
        renderer = CarouselRenderer()
        png = renderer.render_slide(slide, background_bytes, template_zones)
        pdf = renderer.export_pdf([png, ...])
    """

    # Default font paths - will try these in order
    FONT_PATHS = {
        "normal": [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "C:/Windows/Fonts/arial.ttf",
            "/Library/Fonts/Arial.ttf",
        ],
        "bold": [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "C:/Windows/Fonts/arialbd.ttf",
            "/Library/Fonts/Arial Bold.ttf",
        ],
    }

    def __init__(self, fonts_dir: Path | None = None, size: int = CANVAS_SIZE):
        self.fonts_dir = fonts_dir
        self.size = size
        self._font_cache: dict[tuple[str | None, str, int], ImageFont.FreeTypeFont] = {}

    def _hex_to_rgb(self, hex_color: str) -> tuple[int, int, int]:
        """Convert hex color to RGB tuple."""
        hex_color = hex_color.lstrip("#")
        if len(hex_color) == 3:
            hex_color = "".join(c * 2 for c in hex_color)
        try:
            return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
        except ValueError:
            return (0, 0, 0)

    def _get_font(self, family: str | None, weight: str, size: int) -> ImageFont.FreeTypeFont:
        """Get a font, with caching."""
        cache_key = (family, weight, size)
        if cache_key in self._font_cache:
            return self._font_cache[cache_key]

        candidates: list[str] = []
        if family and self.fonts_dir:
            candidates.append(str(self.fonts_dir / f"{family}.ttf"))
        if family:
            candidates.append(family)
        candidates.extend(self.FONT_PATHS.get(weight, self.FONT_PATHS["normal"]))

        font = None
        for path in candidates:
            try:
                font = ImageFont.truetype(path, size)
                break
            except (OSError, IOError):
                continue

        if font is None:
            font = ImageFont.load_default(size)

        self._font_cache[cache_key] = font
        return font

    def _background(self, data: bytes | None) -> Image.Image:
        """Cover-fit a background to the canvas, or plain white."""
        if data is None:
            return Image.new("RGB", (self.size, self.size), (255, 255, 255))

        img = Image.open(BytesIO(data)).convert("RGB")
        scale = max(self.size / img.width, self.size / img.height)
        new_size = (max(self.size, round(img.width * scale)), max(self.size, round(img.height * scale)))
        img = img.resize(new_size, Image.Resampling.LANCZOS)
        left = (img.width - self.size) // 2
        top = (img.height - self.size) // 2
        return img.crop((left, top, left + self.size, top + self.size))

    def _wrap_text(self, text: str, font: ImageFont.FreeTypeFont, max_width: float) -> list[str]:
        """Wrap text to fit within max_width."""
        lines: list[str] = []
        current_line: list[str] = []

        for word in text.split():
            test_line = " ".join(current_line + [word])
            bbox = font.getbbox(test_line)
            if bbox[2] - bbox[0] <= max_width or not current_line:
                current_line.append(word)
            else:
                lines.append(" ".join(current_line))
                current_line = [word]

        if current_line:
            lines.append(" ".join(current_line))
        return lines

    def _draw_zone(self, draw: ImageDraw.ImageDraw, text: str, zone: TextZone) -> None:
        font = self._get_font(zone.fontFamily, zone.fontWeight, zone.fontSize)
        lines = self._wrap_text(text, font, zone.width)
        line_spacing = zone.fontSize * (zone.lineHeight or 1.2)
        y = zone.y + (zone.height - len(lines) * line_spacing) / 2
        color = self._hex_to_rgb(zone.color)

        for line in lines:
            bbox = font.getbbox(line)
            line_width = bbox[2] - bbox[0]
            if zone.textAlign == "left":
                x = zone.x
            elif zone.textAlign == "right":
                x = zone.x + zone.width - line_width
            else:
                x = zone.x + (zone.width - line_width) / 2
            draw.text((x, y), line, font=font, fill=color)
            y += line_spacing

    def render_slide(
        self,
        slide: Slide,
        background: bytes | None = None,
        zones: list[TextZone] | None = None,
    ) -> bytes:
        """Render one slide to PNG bytes."""
        img = self._background(background)
        draw = ImageDraw.Draw(img)

        texts = {
            TextZoneType.HEADLINE: slide.headline,
            TextZoneType.BODY: slide.body,
            TextZoneType.CTA: slide.cta,
        }
        for zone in zones or default_zones(self.size):
            text = texts.get(zone.type)
            if text:
                self._draw_zone(draw, text, zone)

        output = BytesIO()
        img.save(output, format="PNG")
        return output.getvalue()

    def export_pdf(self, rendered: list[bytes]) -> bytes:
        """Combine rendered slides into a multi-page PDF."""
        if not rendered:
            raise ValueError("No slides to export")
        pages = [Image.open(BytesIO(data)).convert("RGB") for data in rendered]
        output = BytesIO()
        pages[0].save(output, format="PDF", save_all=True, append_images=pages[1:])
        return output.getvalue()

    def export_png_zip(self, rendered: list[bytes], stem: str = "slide") -> bytes:
        """Pack rendered slides as numbered PNGs in a ZIP archive."""
        output = BytesIO()
        with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as archive:
            for index, data in enumerate(rendered, start=1):
                archive.writestr(f"{stem}-{index}.png", data)
        return output.getvalue()
