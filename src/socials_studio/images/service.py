"""Image generation, refinement, thumbnails and upscaling.

Every successful call appends a new GeneratedImage row; existing rows are
never modified. Refinements and upscales link back to the image they came
from through ``parent_image_id``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..constants import (
    ASPECT_RATIOS,
    DEFAULT_ASPECT_RATIO,
    IMAGE_MODEL,
    UPSCALE_ASPECT_RATIO,
    UPSCALE_PROMPT_SUFFIX,
    UPSCALED_IMAGE_MODEL,
)
from ..content.models import GeneratedImage, Output, Project, ProjectAsset
from ..errors import NotFoundError, OutOfRangeError, UnavailableError, UnsupportedError
from ..storage import ContentStore

if TYPE_CHECKING:
    from ..providers.image import ImageProvider, ImageResult

_logger = logging.getLogger("ai_calls")


class ImageService:
    """Persisted image operations for a project.

    Usage:
        service = ImageService(store, image_provider)
        image = await service.generate_image(project_id, "Laptop on a clean desk")
        child = await service.refine_image(project_id, image.id, "warmer light")
    """

    def __init__(self, store: ContentStore, provider: ImageProvider):
        self.store = store
        self.provider = provider

    def list_images(self, project_id: str) -> list[GeneratedImage]:
        """A project's images, newest first."""
        images = self.store.find(GeneratedImage, project_id=project_id)
        return sorted(images, key=lambda image: image.created_at, reverse=True)

    def references(self, project_id: str) -> list[bytes]:
        """Bytes of the project's reference images."""
        return [
            asset.data
            for asset in self.store.find(ProjectAsset, project_id=project_id)
            if asset.data
        ]

    def _first_image(self, result: ImageResult, operation: str) -> tuple[bytes, int, int]:
        if not result.images:
            raise UnavailableError(result.text or f"Failed to {operation}: no image returned")
        image = result.images[0]
        return image.data, image.width, image.height

    async def generate_image(
        self,
        project_id: str,
        prompt: str,
        use_references: bool = False,
        aspect_ratio: str = DEFAULT_ASPECT_RATIO,
        visual_concept_index: int | None = None,
    ) -> GeneratedImage:
        """Generate and store a new image.

        Raises:
            NotFoundError: If the project does not exist.
            UnsupportedError: If the aspect ratio is not supported.
            UnavailableError: If the backend returned no image.
        """
        self.store.require(Project, project_id)
        if aspect_ratio not in ASPECT_RATIOS:
            raise UnsupportedError(f"Unsupported aspect ratio: {aspect_ratio}")

        references = self.references(project_id) if use_references else []
        result = await self.provider.generate(prompt, aspect_ratio=aspect_ratio, references=references)
        data, width, height = self._first_image(result, "generate image")

        image = GeneratedImage(
            project_id=project_id,
            prompt=prompt,
            image_bytes=data,
            width=width,
            height=height,
            model=IMAGE_MODEL,
            aspect_ratio=aspect_ratio,
            visual_concept_index=visual_concept_index,
        )
        self.store.put(image)
        _logger.info(
            f"IMAGE_STORED | project:{project_id} | image:{image.id} | "
            f"size:{width}x{height} | references:{len(references)}"
        )
        return image

    async def refine_image(
        self,
        project_id: str,
        image_id: str,
        refinement: str,
        use_references: bool = False,
    ) -> GeneratedImage:
        """Create a refined child of an existing image.

        The child's prompt is the parent's prompt followed by the
        refinement, and it keeps the parent's aspect ratio.

        Raises:
            NotFoundError: If the image does not exist in this project.
            UnavailableError: If the image has no stored bytes, or the
                backend returned no image. No row is written in either case.
        """
        parent = self.store.get(GeneratedImage, image_id)
        if parent is None or parent.project_id != project_id:
            raise NotFoundError("GeneratedImage", image_id)
        if not parent.image_bytes:
            raise UnavailableError(f"Image {image_id} has no stored data to refine")

        references = self.references(project_id) if use_references else []
        result = await self.provider.refine(
            refinement,
            parent.image_bytes,
            references=references,
            aspect_ratio=parent.aspect_ratio,
        )
        data, width, height = self._first_image(result, "refine image")

        image = GeneratedImage(
            project_id=project_id,
            prompt=f"{parent.prompt}\n\nRefinements: {refinement}",
            image_bytes=data,
            width=width,
            height=height,
            model=IMAGE_MODEL,
            aspect_ratio=parent.aspect_ratio,
            parent_image_id=parent.id,
            visual_concept_index=parent.visual_concept_index,
        )
        self.store.put(image)
        _logger.info(f"IMAGE_REFINED | project:{project_id} | parent:{parent.id} | image:{image.id}")
        return image

    async def generate_thumbnail(
        self,
        project_id: str,
        prompt: str,
        thumbnail_index: int,
        use_references: bool = False,
        aspect_ratio: str = DEFAULT_ASPECT_RATIO,
    ) -> GeneratedImage:
        """Generate an image for a visual concept slot.

        Args:
            thumbnail_index: 1-based visual concept number.

        Raises:
            OutOfRangeError: If no visual concept has that number.
        """
        output = self.store.find_one(Output, project_id=project_id)
        count = len(output.visual_concepts) if output else 0
        if not 1 <= thumbnail_index <= count:
            raise OutOfRangeError("thumbnail", thumbnail_index, count)

        return await self.generate_image(
            project_id,
            prompt,
            use_references=use_references,
            aspect_ratio=aspect_ratio,
            visual_concept_index=thumbnail_index - 1,
        )

    async def upscale_image(self, project_id: str, image_id: str) -> GeneratedImage:
        """Produce a high resolution version of an image.

        This is a regeneration from the original prompt with quality
        qualifiers appended, in 16:9. It is not pixel super-resolution: the
        result is a new image that resembles the original.

        Raises:
            NotFoundError: If the image does not exist in this project.
            UnsupportedError: If the image is already an upscale.
        """
        parent = self.store.get(GeneratedImage, image_id)
        if parent is None or parent.project_id != project_id:
            raise NotFoundError("GeneratedImage", image_id)
        if parent.is_upscaled:
            raise UnsupportedError("Image has already been upscaled")

        result = await self.provider.generate(
            f"{parent.prompt}{UPSCALE_PROMPT_SUFFIX}",
            aspect_ratio=UPSCALE_ASPECT_RATIO,
        )
        data, width, height = self._first_image(result, "upscale image")

        image = GeneratedImage(
            project_id=project_id,
            prompt=parent.prompt,
            image_bytes=data,
            width=width,
            height=height,
            model=UPSCALED_IMAGE_MODEL,
            aspect_ratio=UPSCALE_ASPECT_RATIO,
            is_upscaled=True,
            parent_image_id=parent.id,
            visual_concept_index=parent.visual_concept_index,
        )
        self.store.put(image)
        _logger.info(f"IMAGE_UPSCALED | project:{project_id} | parent:{parent.id} | image:{image.id}")
        return image
