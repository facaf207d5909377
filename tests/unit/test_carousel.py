"""Tests for carousel templates, text zones, slide generation and rendering."""

from __future__ import annotations

import zipfile
from io import BytesIO

import pytest
from PIL import Image

from socials_studio.carousel import (
    CarouselOutput,
    CarouselRenderer,
    CarouselService,
    CarouselTemplate,
    Slide,
    SlideGenerator,
    TemplateFile,
    TextZone,
    TextZoneEditor,
    import_template_files,
)
from socials_studio.constants import CANVAS_SIZE, PDF_PLACEHOLDER_SLIDES, SlideField, TemplateFileType, TextZoneType
from socials_studio.content.responses import CarouselResponse, CarouselSlideResponse
from socials_studio.content import ProjectAsset
from socials_studio.errors import NotFoundError, OutOfRangeError, UnavailableError, UnsupportedError

RED = (220, 20, 20)
GREEN = (20, 200, 20)
BLUE = (20, 20, 220)


def center_pixel(data: bytes) -> tuple[int, int, int]:
    """Center color, snapped to the test color it is closest to."""
    with Image.open(BytesIO(data)) as img:
        pixel = img.convert("RGB").getpixel((img.width // 2, img.height // 2))
    return min((RED, GREEN, BLUE), key=lambda color: sum(abs(a - b) for a, b in zip(color, pixel)))


def make_zip(entries: dict[str, bytes]) -> bytes:
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def carousel_response(count: int) -> CarouselResponse:
    return CarouselResponse(slides=[
        CarouselSlideResponse(headline=f"  Headline {i + 1} ", body=f"Body {i + 1}", visual_prompt="desk")
        for i in range(count)
    ])


# =============================================================================
# Template import
# =============================================================================


class TestTemplateImport:
    """Tests for turning uploads into slide backgrounds."""

    @pytest.mark.parametrize("filename,mime,expected", [
        ("deck.pdf", None, TemplateFileType.PDF),
        ("slides.ZIP", None, TemplateFileType.ZIP),
        ("upload", "application/x-zip-compressed", TemplateFileType.ZIP),
        ("cover.webp", None, TemplateFileType.IMAGE),
        ("photo", "image/jpeg", TemplateFileType.IMAGE),
        ("notes.txt", "text/plain", None),
    ])
    def test_file_type_detection(self, filename, mime, expected):
        assert TemplateFile(filename, b"", mime).file_type == expected

    def test_zip_entries_sorted_numerically(self, png_factory):
        data = make_zip({
            "slide10.png": png_factory(color=BLUE),
            "slide2.png": png_factory(color=RED),
            "slide1.png": png_factory(color=GREEN),
            "readme.txt": b"ignored",
            "__MACOSX/": b"",
        })

        slides = import_template_files([TemplateFile("deck.zip", data)])

        assert [center_pixel(slide) for slide in slides] == [GREEN, RED, BLUE]

    def test_image_is_normalized_to_canvas(self, png_factory):
        slides = import_template_files([TemplateFile("wide.png", png_factory(300, 100, RED))])

        with Image.open(BytesIO(slides[0])) as img:
            assert img.size == (CANVAS_SIZE, CANVAS_SIZE)
            # Contain fit: letterboxed on white, nothing cropped
            assert img.convert("RGB").getpixel((5, 5)) == (255, 255, 255)
        assert center_pixel(slides[0]) == RED

    def test_pdf_produces_placeholders(self):
        slides = import_template_files([TemplateFile("deck.pdf", b"%PDF-1.4 ...")])
        assert len(slides) == PDF_PLACEHOLDER_SLIDES

    def test_files_concatenate_in_upload_order(self, png_factory):
        slides = import_template_files([
            TemplateFile("b.png", png_factory(color=BLUE)),
            TemplateFile("a.png", png_factory(color=RED)),
        ])
        assert [center_pixel(slide) for slide in slides] == [BLUE, RED]

    def test_bad_files_are_skipped(self, png_factory):
        slides = import_template_files([
            TemplateFile("broken.png", b"not an image"),
            TemplateFile("broken.zip", b"not a zip"),
            TemplateFile("ok.png", png_factory()),
        ])
        assert len(slides) == 1

    def test_oversized_images_are_skipped(self, png_factory, monkeypatch):
        # 64x64 exceeds twice the limit, 20x20 does not
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        archive = BytesIO()
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("slide1.png", png_factory(64, 64))
            zf.writestr("slide2.png", png_factory(20, 20))

        slides = import_template_files([
            TemplateFile("huge.png", png_factory(64, 64)),
            TemplateFile("deck.zip", archive.getvalue()),
            TemplateFile("ok.png", png_factory(20, 20)),
        ])

        assert len(slides) == 2

    def test_nothing_usable_is_unsupported(self):
        with pytest.raises(UnsupportedError, match="No valid slides"):
            import_template_files([TemplateFile("notes.txt", b"hello")])


# =============================================================================
# Text zones
# =============================================================================


class TestTextZoneEditor:
    """Tests for drawing and editing text zones."""

    def test_draw_zone_with_defaults(self):
        editor = TextZoneEditor()
        editor.begin(100, 100, TextZoneType.HEADLINE)

        zone = editor.finish(900, 300)

        assert (zone.x, zone.y, zone.width, zone.height) == (100, 100, 800, 200)
        assert zone.fontSize == 64
        assert zone.fontWeight == "bold"
        assert zone.color == "#1a1a1a"
        assert zone.textAlign == "center"
        assert not editor.is_drawing

    def test_drag_in_any_direction(self):
        editor = TextZoneEditor()
        editor.begin(500, 400, TextZoneType.BODY)
        zone = editor.finish(200, 100)
        assert (zone.x, zone.y, zone.width, zone.height) == (200, 100, 300, 300)
        assert zone.fontSize == 32

    @pytest.mark.parametrize("end,created", [
        ((149, 200), False),   # 49 wide
        ((150, 200), True),    # exactly 50 wide
        ((300, 129), False),   # 29 tall
        ((300, 130), True),    # exactly 30 tall
    ])
    def test_minimum_size(self, end, created):
        editor = TextZoneEditor()
        editor.begin(100, 100)
        assert (editor.finish(*end) is not None) == created
        assert len(editor.zones) == int(created)

    def test_points_clamped_to_canvas(self):
        editor = TextZoneEditor()
        editor.begin(-50, 1000, TextZoneType.CTA)
        zone = editor.finish(400, 2000)
        assert (zone.x, zone.y, zone.width, zone.height) == (0, 1000, 400, 80)

    def test_finish_without_begin(self):
        assert TextZoneEditor().finish(500, 500) is None

    def test_preview_and_cancel(self):
        editor = TextZoneEditor()
        editor.begin(10, 10)
        assert editor.preview(110, 60) == (10, 10, 100, 50)
        editor.cancel()
        assert editor.preview(110, 60) is None

    def test_to_canvas_scales_preview_coordinates(self):
        assert TextZoneEditor().to_canvas(270, 135, 540, 540) == (540, 270)

    def test_update_and_remove(self):
        editor = TextZoneEditor()
        zone = editor.add_zone(0, 0, 200, 100, TextZoneType.BODY)

        updated = editor.update_zone(zone.id, fontSize=40, color="#ffffff")
        assert updated.fontSize == 40
        assert updated.id == zone.id

        with pytest.raises(UnsupportedError):
            editor.update_zone(zone.id, width=10)

        editor.remove_zone(zone.id)
        assert editor.zones == []
        with pytest.raises(NotFoundError):
            editor.remove_zone(zone.id)

    def test_zone_at_returns_topmost(self):
        editor = TextZoneEditor()
        bottom = editor.add_zone(0, 0, 500, 500, TextZoneType.BODY)
        top = editor.add_zone(100, 100, 100, 100, TextZoneType.HEADLINE)

        assert editor.zone_at(150, 150).id == top.id
        assert editor.zone_at(400, 400).id == bottom.id
        assert editor.zone_at(900, 900) is None

    def test_zone_geometry_must_be_positive(self):
        with pytest.raises(ValueError):
            TextZone(type=TextZoneType.BODY, x=0, y=0, width=0, height=10)


# =============================================================================
# Generation
# =============================================================================


class TestSlideGenerator:
    """Tests for SlideGenerator."""

    @pytest.mark.asyncio
    async def test_generates_positioned_slides(self, mock_text_provider):
        mock_text_provider.generate_structured.return_value = carousel_response(4)

        slides = await SlideGenerator(mock_text_provider).generate("Some content", 4)

        assert [slide.position for slide in slides] == [0, 1, 2, 3]
        assert slides[0].headline == "Headline 1"
        assert len({slide.id for slide in slides}) == 4
        assert "Number of slides: 4" in mock_text_provider.generate_structured.call_args.kwargs["prompt"]

    @pytest.mark.asyncio
    async def test_extra_slides_are_trimmed(self, mock_text_provider):
        mock_text_provider.generate_structured.return_value = carousel_response(7)
        slides = await SlideGenerator(mock_text_provider).generate("Some content", 5)
        assert len(slides) == 5

    @pytest.mark.asyncio
    async def test_too_few_slides(self, mock_text_provider):
        mock_text_provider.generate_structured.return_value = carousel_response(2)
        with pytest.raises(UnavailableError):
            await SlideGenerator(mock_text_provider).generate("Some content", 5)

    @pytest.mark.asyncio
    async def test_empty_headline(self, mock_text_provider):
        response = carousel_response(3)
        response.slides[1].headline = "   "
        mock_text_provider.generate_structured.return_value = response
        with pytest.raises(UnavailableError, match="Slide 2"):
            await SlideGenerator(mock_text_provider).generate("Some content", 3)

    @pytest.mark.asyncio
    async def test_needs_two_slides(self, mock_text_provider):
        with pytest.raises(UnsupportedError):
            await SlideGenerator(mock_text_provider).generate("Some content", 1)


# =============================================================================
# Service
# =============================================================================


class TestCarouselService:
    """Tests for CarouselService."""

    @pytest.fixture
    def service(self, store, mock_text_provider) -> CarouselService:
        return CarouselService(store, SlideGenerator(mock_text_provider))

    @pytest.mark.asyncio
    async def test_generate_from_body(self, service, output, mock_text_provider):
        mock_text_provider.generate_structured.return_value = carousel_response(5)

        carousel = await service.generate(output.project_id)

        assert len(carousel.slides) == 5
        assert "Body text about AI." in mock_text_provider.generate_structured.call_args.kwargs["prompt"]

    @pytest.mark.asyncio
    async def test_generate_without_content(self, service, project):
        with pytest.raises(UnavailableError, match="No content found"):
            await service.generate(project.id)

    @pytest.mark.asyncio
    async def test_template_overrides_slide_count(self, service, store, project, mock_text_provider):
        template = CarouselTemplate(name="Brand", slide_count=3)
        store.put(template)
        mock_text_provider.generate_structured.return_value = carousel_response(3)

        carousel = await service.generate(project.id, slide_count=8, source_content="text", template_id=template.id)

        assert len(carousel.slides) == 3
        assert carousel.template_id == template.id

    @pytest.mark.asyncio
    async def test_regenerate_keeps_carousel_id(self, service, project, mock_text_provider):
        mock_text_provider.generate_structured.return_value = carousel_response(3)
        first = await service.generate(project.id, 3, source_content="text")
        second = await service.generate(project.id, 3, source_content="other")
        assert first.id == second.id

    def test_edit_slide(self, service, store, project):
        store.put(CarouselOutput(project_id=project.id, slides=[Slide(headline="A"), Slide(headline="B")]))

        carousel = service.edit_slide(project.id, 1, SlideField.VISUAL_PROMPT, "sunset")

        assert carousel.slides[1].visual_prompt == "sunset"

    def test_edit_missing_carousel(self, service, project):
        with pytest.raises(NotFoundError):
            service.edit_slide(project.id, 0, SlideField.HEADLINE, "x")

    def test_slide_order_operations_keep_positions_dense(self, service, project):
        for headline in ("A", "B", "C"):
            service.add_slide(project.id, Slide(headline=headline))

        service.move_slide(project.id, 2, 0)
        carousel = service.remove_slide(project.id, 1)

        assert [slide.headline for slide in carousel.slides] == ["C", "B"]
        assert [slide.position for slide in carousel.slides] == [0, 1]
        with pytest.raises(OutOfRangeError):
            service.move_slide(project.id, 0, 5)

    def test_import_template_stores_slides(self, service, png_factory):
        template = service.import_template("Brand", [
            TemplateFile("1.png", png_factory(color=RED)),
            TemplateFile("2.png", png_factory(color=BLUE)),
        ])

        slides = service.template_slides(template.id)

        assert template.slide_count == 2
        assert [slide.position for slide in slides] == [0, 1]
        assert center_pixel(slides[1].background) == BLUE

    def test_render_uses_slide_image_over_template(self, service, store, project, png_factory):
        template = service.import_template("Brand", [TemplateFile("1.png", png_factory(color=BLUE))] * 2)
        asset = ProjectAsset(project_id=project.id, filename="logo.png", data=png_factory(color=GREEN))
        store.put(asset)
        store.put(CarouselOutput(
            project_id=project.id,
            template_id=template.id,
            slides=[Slide(headline=""), Slide(headline="", image_id=asset.id)],
        ))

        rendered = service.render(project.id)

        assert [center_pixel(png) for png in rendered] == [BLUE, GREEN]


class TestRenderer:
    """Tests for CarouselRenderer exports."""

    def test_render_slide_size(self):
        png = CarouselRenderer().render_slide(Slide(headline="Hello world", body="Body", cta="Follow"))
        with Image.open(BytesIO(png)) as img:
            assert img.size == (CANVAS_SIZE, CANVAS_SIZE)

    def test_export_png_zip(self):
        renderer = CarouselRenderer()
        rendered = [renderer.render_slide(Slide(headline=str(i))) for i in range(3)]

        with zipfile.ZipFile(BytesIO(renderer.export_png_zip(rendered))) as archive:
            assert archive.namelist() == ["slide-1.png", "slide-2.png", "slide-3.png"]

    def test_export_pdf(self):
        renderer = CarouselRenderer()
        pdf = renderer.export_pdf([renderer.render_slide(Slide(headline="A"))] * 2)
        assert pdf.startswith(b"%PDF")

    def test_export_pdf_without_slides(self):
        with pytest.raises(ValueError):
            CarouselRenderer().export_pdf([])
