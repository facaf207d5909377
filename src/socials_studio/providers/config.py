"""Provider configuration loading and validation.

The YAML file lists text and image backends with a priority each. Calls
walk the enabled backends of a kind from the lowest priority number up,
moving to the next one on error when ``fallback_on_error`` is set.

Example ``config/providers.yaml``::

    provider_settings:
      timeout_seconds: 60
    text_providers:
      anthropic:
        priority: 1
        model: anthropic/claude-sonnet-4-5
        api_key_env: ANTHROPIC_API_KEY
    image_providers:
      fal:
        priority: 1
        type: fal
        model: fal-ai/nano-banana
        api_key_env: FAL_KEY
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal, TypeVar

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ..constants import MODEL_TIMEOUT_SECONDS

# Load .env file
load_dotenv()

DEFAULT_CONFIG_PATH = Path("config") / "providers.yaml"


class ProviderSettings(BaseModel):
    """Global provider settings."""

    timeout_seconds: int = MODEL_TIMEOUT_SECONDS
    fallback_on_error: bool = True


class BackendConfig(BaseModel):
    """Fields shared by text and image backends.

    Credentials and endpoints can be given inline or through the name of
    an environment variable; inline values win.
    """

    priority: int
    enabled: bool = True
    api_key: str | None = None
    api_key_env: str | None = None
    base_url: str | None = None
    base_url_env: str | None = None

    def get_api_key(self) -> str | None:
        return self.api_key or (os.getenv(self.api_key_env) if self.api_key_env else None)

    def get_base_url(self) -> str | None:
        return self.base_url or (os.getenv(self.base_url_env) if self.base_url_env else None)


class TextProviderConfig(BackendConfig):
    """A chat model, named ``"<provider>/<model id>"``."""

    model: str

    @property
    def model_id(self) -> str:
        """Model id without the provider prefix ("openai/gpt-4o" -> "gpt-4o")."""
        return self.model.split("/", 1)[1] if "/" in self.model else self.model


class ImageProviderConfig(BackendConfig):
    """An image model; ``edit_model`` is used when source or reference images are sent."""

    type: Literal["openai", "fal"]
    model: str
    edit_model: str | None = None
    settings: dict[str, Any] = Field(default_factory=dict)


_Backend = TypeVar("_Backend", bound=BackendConfig)


def _by_priority(backends: dict[str, _Backend]) -> list[tuple[str, _Backend]]:
    enabled = [(name, config) for name, config in backends.items() if config.enabled]
    return sorted(enabled, key=lambda item: item[1].priority)


class ProviderConfig(BaseModel):
    """Full provider configuration."""

    provider_settings: ProviderSettings = Field(default_factory=ProviderSettings)
    text_providers: dict[str, TextProviderConfig] = Field(default_factory=dict)
    image_providers: dict[str, ImageProviderConfig] = Field(default_factory=dict)

    def text_chain(self) -> list[tuple[str, TextProviderConfig]]:
        """Enabled text backends in the order they are tried."""
        return _by_priority(self.text_providers)

    def image_chain(self) -> list[tuple[str, ImageProviderConfig]]:
        """Enabled image backends in the order they are tried."""
        return _by_priority(self.image_providers)


def load_provider_config(config_path: Path | None = None) -> ProviderConfig:
    """Load provider configuration from YAML.

    A missing file gives the defaults (no backends), so commands that never
    call a model work without any configuration.
    """
    config_path = config_path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return ProviderConfig()

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return ProviderConfig.model_validate(data)
