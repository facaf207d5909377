"""Carousel operations: generation, slide edits, images and templates.

Slides are stored inline on the CarouselOutput. Every change renumbers
positions from list order before saving, so positions stay 0..n-1.
"""

from __future__ import annotations

import logging

from ..constants import DEFAULT_SLIDE_COUNT, SlideField
from ..content.models import Output, Project, ProjectAsset
from ..errors import NotFoundError, OutOfRangeError, UnavailableError
from ..storage import ContentStore
from ..utils import now_utc
from .generator import SlideGenerator
from .importer import TemplateFile, import_template_files
from .models import CarouselOutput, CarouselTemplate, Slide, TemplateSlide, TextZone
from .renderer import CarouselRenderer

_logger = logging.getLogger("carousel")


class CarouselService:
    """Operations on a project's carousel and on carousel templates.

    Usage:
        service = CarouselService(store, SlideGenerator(text_provider))
        carousel = await service.generate(project_id, slide_count=5)
        service.edit_slide(project_id, 0, SlideField.HEADLINE, "Stop guessing")
        service.set_slide_image(project_id, 1, asset_id)
    """

    def __init__(self, store: ContentStore, generator: SlideGenerator | None = None):
        self.store = store
        self.generator = generator

    # -------------------------------------------------------------------------
    # Carousel
    # -------------------------------------------------------------------------

    def get(self, project_id: str) -> CarouselOutput | None:
        return self.store.find_one(CarouselOutput, project_id=project_id)

    def require(self, project_id: str) -> CarouselOutput:
        carousel = self.get(project_id)
        if carousel is None:
            raise NotFoundError("CarouselOutput", project_id)
        return carousel

    def _save(self, carousel: CarouselOutput) -> CarouselOutput:
        carousel.renumber()
        carousel.updated_at = now_utc()
        self.store.put(carousel)
        return carousel

    def _slide(self, carousel: CarouselOutput, slide_index: int) -> Slide:
        if not 0 <= slide_index < len(carousel.slides):
            raise OutOfRangeError("slide", slide_index, len(carousel.slides))
        return carousel.slides[slide_index]

    async def generate(
        self,
        project_id: str,
        slide_count: int = DEFAULT_SLIDE_COUNT,
        source_content: str | None = None,
        template_id: str | None = None,
    ) -> CarouselOutput:
        """Generate slides and store them as the project's carousel.

        A template's slide count overrides ``slide_count``. Without
        ``source_content`` the project's body content is used. An existing
        carousel is replaced in place (same id).

        Raises:
            UnavailableError: If there is no content to build slides from.
        """
        self.store.require(Project, project_id)
        if self.generator is None:
            raise UnavailableError("No slide generator configured")

        if not source_content:
            output = self.store.find_one(Output, project_id=project_id)
            if output is None or not output.body_content.strip():
                raise UnavailableError(
                    "No content found. Generate body content first or provide source content."
                )
            source_content = output.body_content

        if template_id:
            template = self.store.get(CarouselTemplate, template_id)
            if template is not None and template.slide_count > 0:
                slide_count = template.slide_count

        slides = await self.generator.generate(source_content, slide_count)

        carousel = self.get(project_id) or CarouselOutput(project_id=project_id)
        carousel.slides = slides
        carousel.template_id = template_id
        _logger.info(
            f"CAROUSEL_GENERATED | project:{project_id} | slides:{len(slides)} | template:{template_id}"
        )
        return self._save(carousel)

    def edit_slide(self, project_id: str, slide_index: int, field: SlideField, value: str) -> CarouselOutput:
        """Set one text field of a slide.

        Raises:
            NotFoundError: If the project has no carousel.
            OutOfRangeError: If the slide does not exist.
        """
        carousel = self.require(project_id)
        slide = self._slide(carousel, slide_index)
        setattr(slide, SlideField(field).value, value)
        return self._save(carousel)

    def set_slide_image(self, project_id: str, slide_index: int, asset_id: str) -> CarouselOutput:
        """Attach one of the project's reference images to a slide.

        Raises:
            NotFoundError: If the carousel is missing or the asset does not
                belong to this project.
            OutOfRangeError: If the slide does not exist.
        """
        carousel = self.require(project_id)
        slide = self._slide(carousel, slide_index)

        asset = self.store.get(ProjectAsset, asset_id)
        if asset is None or asset.project_id != project_id:
            raise NotFoundError("ProjectAsset", asset_id)

        slide.image_id = asset.id
        return self._save(carousel)

    def remove_slide_image(self, project_id: str, slide_index: int) -> CarouselOutput:
        carousel = self.require(project_id)
        self._slide(carousel, slide_index).image_id = None
        return self._save(carousel)

    def add_slide(self, project_id: str, slide: Slide, index: int | None = None) -> CarouselOutput:
        """Insert a slide (appended when ``index`` is None)."""
        carousel = self.get(project_id) or CarouselOutput(project_id=project_id)
        if index is None:
            index = len(carousel.slides)
        if not 0 <= index <= len(carousel.slides):
            raise OutOfRangeError("slide", index, len(carousel.slides))
        carousel.slides.insert(index, slide)
        return self._save(carousel)

    def remove_slide(self, project_id: str, slide_index: int) -> CarouselOutput:
        carousel = self.require(project_id)
        self._slide(carousel, slide_index)
        carousel.slides.pop(slide_index)
        return self._save(carousel)

    def move_slide(self, project_id: str, from_index: int, to_index: int) -> CarouselOutput:
        """Move a slide to another position."""
        carousel = self.require(project_id)
        slide = self._slide(carousel, from_index)
        if not 0 <= to_index < len(carousel.slides):
            raise OutOfRangeError("slide", to_index, len(carousel.slides))
        carousel.slides.pop(from_index)
        carousel.slides.insert(to_index, slide)
        return self._save(carousel)

    def set_template(self, project_id: str, template_id: str | None) -> CarouselOutput:
        carousel = self.require(project_id)
        if template_id is not None:
            self.store.require(CarouselTemplate, template_id)
        carousel.template_id = template_id
        return self._save(carousel)

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------

    def import_template(self, name: str, files: list[TemplateFile]) -> CarouselTemplate:
        """Import uploaded files as a new template.

        Raises:
            UnsupportedError: If no file produced a slide.
        """
        backgrounds = import_template_files(files)
        template = CarouselTemplate(name=name, slide_count=len(backgrounds))
        self.store.put(template)
        for position, background in enumerate(backgrounds):
            self.store.put(TemplateSlide(
                template_id=template.id,
                position=position,
                background=background,
            ))
        _logger.info(f"TEMPLATE_IMPORTED | template:{template.id} | slides:{len(backgrounds)}")
        return template

    def template_slides(self, template_id: str) -> list[TemplateSlide]:
        """A template's slides in position order."""
        slides = self.store.find(TemplateSlide, template_id=template_id)
        return sorted(slides, key=lambda slide: slide.position)

    def set_text_zones(self, template_slide_id: str, zones: list[TextZone]) -> TemplateSlide:
        slide = self.store.require(TemplateSlide, template_slide_id)
        slide.text_zones = list(zones)
        self.store.put(slide)
        return slide

    def delete_template(self, template_id: str) -> bool:
        """Delete a template, its slides, and unlink carousels using it."""
        return self.store.delete(CarouselTemplate, template_id)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self, project_id: str, renderer: CarouselRenderer | None = None) -> list[bytes]:
        """Render every slide of a project's carousel to PNG.

        The background of a slide is its attached image, else the template
        slide at the same position, else plain white.
        """
        carousel = self.require(project_id)
        renderer = renderer or CarouselRenderer()
        template_slides = (
            {slide.position: slide for slide in self.template_slides(carousel.template_id)}
            if carousel.template_id else {}
        )

        rendered = []
        for slide in carousel.slides:
            template_slide = template_slides.get(slide.position)
            background = template_slide.background if template_slide else None
            zones = template_slide.text_zones if template_slide else None

            if slide.image_id:
                asset = self.store.get(ProjectAsset, slide.image_id)
                if asset is not None and asset.data:
                    background = asset.data
                else:
                    _logger.warning(
                        f"SLIDE_IMAGE_MISSING | project:{project_id} | slide:{slide.position} | asset:{slide.image_id}"
                    )

            rendered.append(renderer.render_slide(slide, background, zones or None))
        return rendered
