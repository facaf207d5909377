"""Assistant feature - the chat command."""

from .commands import chat
from .display import show_action_results, show_reply

__all__ = [
    "chat",
    "show_action_results",
    "show_reply",
]
