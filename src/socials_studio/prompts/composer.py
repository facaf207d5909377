"""Layered system prompt composition.

A composed prompt is the caller's base prompt followed by up to three
optional layers read from settings:

    base
    --- Voice & Style ---      master_voice_prompt
    --- Platform Tone ---      {platform}_tone_prompt
    --- Section Expert ---     section agent prompt for the step

Layers whose setting is missing or blank are left out.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..constants import Platform, WorkflowStep
from ..content.models import Setting
from ..storage import ContentStore
from .cache import SettingsCache
from .defaults import seed_default_settings

SECTION_SETTING_KEYS: Mapping[WorkflowStep, str] = MappingProxyType({
    WorkflowStep.HOOKS: "hooks_agent_prompt",
    WorkflowStep.BODY: "body_agent_prompt",
    WorkflowStep.INTROS: "intros_agent_prompt",
    WorkflowStep.TITLES: "titles_agent_prompt",
    WorkflowStep.CTAS: "ctas_agent_prompt",
    WorkflowStep.VISUALS: "thumbnails_agent_prompt",
    WorkflowStep.THUMBNAILS: "thumbnails_agent_prompt",
})
"""Workflow step -> section agent setting key."""


class PromptComposer:
    """Builds system prompts from a base prompt and settings layers.

    Usage:
        composer = PromptComposer.from_store(store)
        system = composer.compose(BASE_PROMPT, Platform.LINKEDIN, WorkflowStep.HOOKS)
    """

    def __init__(self, cache: SettingsCache, store: ContentStore | None = None):
        self.cache = cache
        self.store = store

    @classmethod
    def from_store(cls, store: ContentStore, ttl_seconds: float = 5.0) -> PromptComposer:
        """Composer reading settings from the store, seeding defaults first."""
        seed_default_settings(store)

        def load() -> dict[str, str]:
            return {setting.id: setting.value for setting in store.find(Setting)}

        return cls(SettingsCache(load, ttl_seconds=ttl_seconds), store)

    def _layer(self, title: str, key: str) -> str:
        value = self.cache.get(key)
        if value and value.strip():
            return f"\n\n--- {title} ---\n{value}"
        return ""

    def compose(
        self,
        base: str,
        platform: Platform | None = None,
        step: WorkflowStep | None = None,
    ) -> str:
        """Base prompt plus the voice, platform and section layers."""
        composed = base + self._layer("Voice & Style", "master_voice_prompt")
        if platform is not None:
            composed += self._layer("Platform Tone", f"{Platform(platform).value}_tone_prompt")
        if step is not None:
            key = SECTION_SETTING_KEYS.get(WorkflowStep(step))
            if key:
                composed += self._layer("Section Expert", key)
        return composed

    def update_setting(self, key: str, value: str) -> Setting:
        """Save a setting and drop the cached values."""
        if self.store is None:
            raise RuntimeError("PromptComposer has no store to save settings to")
        setting = Setting(id=key, value=value)
        self.store.put(setting)
        self.cache.invalidate()
        return setting
