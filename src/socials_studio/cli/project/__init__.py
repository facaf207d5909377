"""Project commands."""

from .commands import project_app

__all__ = ["project_app"]
