"""Content feature - generation, selection and editing commands."""

from .commands import content_app
from .display import show_history, show_output, show_section

__all__ = [
    "content_app",
    "show_history",
    "show_output",
    "show_section",
]
