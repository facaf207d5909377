"""Conversational assistant: context building and request orchestration."""

from .context import ContextBuilder, format_current_content, match_thumbnail
from .orchestrator import AssistantOrchestrator, AssistantReply, append_image_errors

__all__ = [
    "ContextBuilder",
    "format_current_content",
    "match_thumbnail",
    "AssistantOrchestrator",
    "AssistantReply",
    "append_image_errors",
]
