"""Service wiring for CLI commands.

Services are built from StudioSettings once per invocation. AI providers
are created on first use, so commands that never call a model do not need
provider configuration.
"""

from __future__ import annotations

from functools import cached_property

from ...assistant import AssistantOrchestrator, ContextBuilder
from ...carousel import CarouselService, SlideGenerator
from ...config import StudioSettings
from ...content import ContentGenerator, OutputService, ProjectService
from ...images import ImageService
from ...prompts import PromptComposer
from ...providers import ImageProvider, TextProvider, load_provider_config
from ...storage import ContentStore


class Services:
    """Lazily constructed services sharing one store."""

    def __init__(self, settings: StudioSettings):
        self.settings = settings
        self.store = ContentStore(settings.data_dir)

    @cached_property
    def provider_config(self):
        return load_provider_config(self.settings.providers_config)

    @cached_property
    def text_provider(self) -> TextProvider:
        return TextProvider(self.provider_config)

    @cached_property
    def image_provider(self) -> ImageProvider:
        return ImageProvider(self.provider_config)

    @cached_property
    def composer(self) -> PromptComposer:
        return PromptComposer.from_store(self.store, ttl_seconds=self.settings.settings_ttl_seconds)

    @cached_property
    def projects(self) -> ProjectService:
        return ProjectService(self.store)

    @cached_property
    def outputs(self) -> OutputService:
        return OutputService(self.store, ContentGenerator(self.text_provider, self.composer))

    @cached_property
    def carousels(self) -> CarouselService:
        return CarouselService(self.store, SlideGenerator(self.text_provider))

    @cached_property
    def images(self) -> ImageService:
        return ImageService(self.store, self.image_provider)

    @cached_property
    def assistant(self) -> AssistantOrchestrator:
        return AssistantOrchestrator(
            self.store,
            self.text_provider,
            self.outputs,
            self.carousels,
            self.images,
            composer=self.composer,
            history_limit=self.settings.history_limit,
            max_tokens=self.settings.max_tokens,
            context_builder=ContextBuilder(self.store, self.settings.context_char_limit),
        )


_services: Services | None = None


def init_services(settings: StudioSettings) -> Services:
    """Build the services for this invocation."""
    global _services
    _services = Services(settings)
    return _services


def get_services() -> Services:
    """Services for the running command (built from the environment if needed)."""
    global _services
    if _services is None:
        _services = Services(StudioSettings())
    return _services
