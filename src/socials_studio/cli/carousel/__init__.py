"""Carousel feature - template import, slide generation and export."""

from .commands import carousel_app

__all__ = ["carousel_app"]
