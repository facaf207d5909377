"""Conversation turns and normalization."""

from .normalizer import Turn, TURN_SEPARATOR, normalize_turns

__all__ = ["Turn", "TURN_SEPARATOR", "normalize_turns"]
