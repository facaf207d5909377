"""Image feature - generation, refinement and upscale commands."""

from .commands import image_app

__all__ = ["image_app"]
