"""Carousel subsystem: slides, templates, text zones and rendering.

Architecture:
- models.py: Slide, CarouselOutput, TextZone, CarouselTemplate, TemplateSlide
- importer.py: uploaded files -> normalized slide backgrounds
- zones.py: TextZoneEditor for authoring template zones
- generator.py: SlideGenerator (AI narrative -> slides)
- renderer.py: CarouselRenderer (PNG, PDF, PNG zip)
- service.py: CarouselService (slide edits, templates, render)
"""

from .models import Slide, CarouselOutput, TextZone, CarouselTemplate, TemplateSlide
from .importer import TemplateFile, import_template_files, normalize_image, placeholder_slide
from .zones import TextZoneEditor, ZONE_DEFAULTS
from .generator import SlideGenerator, CAROUSEL_GENERATION_PROMPT
from .renderer import CarouselRenderer, default_zones
from .service import CarouselService

__all__ = [
    # Models
    "Slide",
    "CarouselOutput",
    "TextZone",
    "CarouselTemplate",
    "TemplateSlide",
    # Import
    "TemplateFile",
    "import_template_files",
    "normalize_image",
    "placeholder_slide",
    # Zones
    "TextZoneEditor",
    "ZONE_DEFAULTS",
    # Generation & rendering
    "SlideGenerator",
    "CAROUSEL_GENERATION_PROMPT",
    "CarouselRenderer",
    "default_zones",
    "CarouselService",
]
