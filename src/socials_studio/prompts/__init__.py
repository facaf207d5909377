"""Prompt settings, layered composition and default prompts."""

from .cache import SettingsCache
from .defaults import ASSISTANT_SYSTEM_PROMPT, DEFAULT_SETTINGS, seed_default_settings
from .composer import PromptComposer, SECTION_SETTING_KEYS

__all__ = [
    "SettingsCache",
    "ASSISTANT_SYSTEM_PROMPT",
    "DEFAULT_SETTINGS",
    "seed_default_settings",
    "PromptComposer",
    "SECTION_SETTING_KEYS",
]
