"""Generated images: creation, refinement, thumbnails and upscales."""

from .service import ImageService

__all__ = ["ImageService"]
