"""AI Providers - Text (Agno + tool calling) and Image generation."""

from .text import TextProvider, ModelReply, ToolInvocation
from .image import ImageProvider, ImageResult, GeneratedImageData
from .config import ProviderConfig, load_provider_config

__all__ = [
    "TextProvider",
    "ModelReply",
    "ToolInvocation",
    "ImageProvider",
    "ImageResult",
    "GeneratedImageData",
    "ProviderConfig",
    "load_provider_config",
]
