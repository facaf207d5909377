"""CLI package for Socials Studio.

Structure:
- core/: console output and service wiring
- project/: project lifecycle commands
- content/: generation, selection and editing commands
- carousel/: template import, slide generation and export
- image/: image generation, refinement and upscale
- assistant/: the chat command
"""

from .app import app, main

__all__ = ["app", "main"]
