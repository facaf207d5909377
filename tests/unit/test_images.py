"""Tests for ImageService."""

from __future__ import annotations

import pytest

from socials_studio.constants import IMAGE_MODEL, UPSCALED_IMAGE_MODEL
from socials_studio.content import GeneratedImage, ProjectAsset
from socials_studio.errors import NotFoundError, OutOfRangeError, UnavailableError, UnsupportedError
from socials_studio.images import ImageService
from socials_studio.providers.image import ImageResult


@pytest.fixture
def service(store, mock_image_provider) -> ImageService:
    return ImageService(store, mock_image_provider)


@pytest.fixture
def stored_image(store, project, png_bytes) -> GeneratedImage:
    image = GeneratedImage(
        project_id=project.id,
        prompt="A laptop on a desk",
        image_bytes=png_bytes,
        width=64,
        height=64,
        aspect_ratio="9:16",
        visual_concept_index=0,
    )
    store.put(image)
    return image


# =============================================================================
# Generation
# =============================================================================


class TestGenerateImage:
    """Tests for generate_image and generate_thumbnail."""

    @pytest.mark.asyncio
    async def test_generates_and_stores(self, service, store, project, mock_image_provider):
        image = await service.generate_image(project.id, "A calm office", aspect_ratio="16:9")

        stored = store.get(GeneratedImage, image.id)
        assert stored.image_bytes == image.image_bytes
        assert stored.model == IMAGE_MODEL
        assert stored.aspect_ratio == "16:9"
        assert (stored.width, stored.height) == (64, 64)
        mock_image_provider.generate.assert_awaited_once_with("A calm office", aspect_ratio="16:9", references=[])

    @pytest.mark.asyncio
    async def test_rejects_unknown_aspect_ratio(self, service, project, mock_image_provider):
        with pytest.raises(UnsupportedError):
            await service.generate_image(project.id, "x", aspect_ratio="4:5")
        mock_image_provider.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sends_references_when_asked(self, service, store, project, png_bytes, mock_image_provider):
        store.put(ProjectAsset(project_id=project.id, filename="logo.png", data=png_bytes))

        await service.generate_image(project.id, "Branded banner", use_references=True)

        assert mock_image_provider.generate.call_args.kwargs["references"] == [png_bytes]

    @pytest.mark.asyncio
    async def test_no_image_returned(self, service, store, project, mock_image_provider):
        mock_image_provider.generate.return_value = ImageResult(text="I can't draw that.")

        with pytest.raises(UnavailableError, match="I can't draw that."):
            await service.generate_image(project.id, "x")
        assert service.list_images(project.id) == []

    @pytest.mark.asyncio
    async def test_unknown_project(self, service):
        with pytest.raises(NotFoundError):
            await service.generate_image("missing", "x")

    @pytest.mark.asyncio
    async def test_thumbnail_links_visual_concept(self, service, output):
        image = await service.generate_thumbnail(output.project_id, "Whiteboard sketch", 2)
        assert image.visual_concept_index == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("index", [0, 3])
    async def test_thumbnail_out_of_range(self, service, output, index):
        with pytest.raises(OutOfRangeError):
            await service.generate_thumbnail(output.project_id, "x", index)

    @pytest.mark.asyncio
    async def test_list_images_newest_first(self, service, project):
        first = await service.generate_image(project.id, "first")
        second = await service.generate_image(project.id, "second")

        images = service.list_images(project.id)

        assert {image.id for image in images} == {first.id, second.id}
        assert images[0].created_at >= images[1].created_at


# =============================================================================
# Refinement and upscaling
# =============================================================================


class TestRefineImage:
    """Tests for refine_image."""

    @pytest.mark.asyncio
    async def test_creates_linked_child(self, service, project, stored_image, mock_image_provider):
        child = await service.refine_image(project.id, stored_image.id, "warmer light")

        assert child.id != stored_image.id
        assert child.parent_image_id == stored_image.id
        assert child.prompt == "A laptop on a desk\n\nRefinements: warmer light"
        assert child.aspect_ratio == "9:16"
        assert child.visual_concept_index == 0
        mock_image_provider.refine.assert_awaited_once()
        assert mock_image_provider.refine.call_args.args[1] == stored_image.image_bytes

    @pytest.mark.asyncio
    async def test_parent_is_unchanged(self, service, store, project, stored_image):
        await service.refine_image(project.id, stored_image.id, "warmer light")
        assert store.get(GeneratedImage, stored_image.id).prompt == "A laptop on a desk"

    @pytest.mark.asyncio
    async def test_image_without_bytes(self, service, store, project, mock_image_provider):
        empty = GeneratedImage(project_id=project.id, prompt="lost")
        store.put(empty)

        with pytest.raises(UnavailableError):
            await service.refine_image(project.id, empty.id, "brighter")

        assert len(service.list_images(project.id)) == 1
        mock_image_provider.refine.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_image_from_other_project(self, service, stored_image):
        with pytest.raises(NotFoundError):
            await service.refine_image("other-project", stored_image.id, "brighter")


class TestUpscaleImage:
    """Tests for upscale_image."""

    @pytest.mark.asyncio
    async def test_regenerates_wide_high_res(self, service, project, stored_image, mock_image_provider):
        upscaled = await service.upscale_image(project.id, stored_image.id)

        assert upscaled.is_upscaled
        assert upscaled.model == UPSCALED_IMAGE_MODEL
        assert upscaled.aspect_ratio == "16:9"
        assert upscaled.parent_image_id == stored_image.id
        assert upscaled.prompt == stored_image.prompt
        prompt = mock_image_provider.generate.call_args.args[0]
        assert prompt.startswith("A laptop on a desk")
        assert prompt != "A laptop on a desk"

    @pytest.mark.asyncio
    async def test_already_upscaled(self, service, store, project, png_bytes):
        image = GeneratedImage(project_id=project.id, prompt="x", image_bytes=png_bytes, is_upscaled=True)
        store.put(image)

        with pytest.raises(UnsupportedError):
            await service.upscale_image(project.id, image.id)
