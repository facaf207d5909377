"""Image generation provider with support for multiple backends.

Backends:
- OpenAI images API (generate, or edit when reference/source images exist)
- fal.ai (text-to-image model, edit model when images are supplied)

A backend may answer with text instead of an image (for example a refusal).
That comes back as an ImageResult with no images and the text set; the
caller decides how to surface it.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import os
import time
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Awaitable, Callable

import httpx
from PIL import Image
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..constants import DEFAULT_ASPECT_RATIO, IMAGE_SIZES
from ..errors import ProviderTimeoutError
from .config import ImageProviderConfig, ProviderConfig, load_provider_config

_logger = logging.getLogger("ai_calls")

# Type for AI event callback
AIEventCallback = Callable[[dict[str, Any]], Awaitable[None]] | None

DOWNLOAD_TIMEOUT_SECONDS = 120.0


@dataclass
class GeneratedImageData:
    """One image returned by a backend."""

    data: bytes
    width: int
    height: int

    @classmethod
    def from_bytes(cls, data: bytes) -> GeneratedImageData:
        """Build from raw image bytes, reading dimensions with Pillow."""
        with Image.open(BytesIO(data)) as img:
            width, height = img.size
        return cls(data=data, width=width, height=height)


@dataclass
class ImageResult:
    """Images (possibly none) plus any text the backend returned."""

    images: list[GeneratedImageData] = field(default_factory=list)
    text: str | None = None


class ImageProvider:
    """Unified image generation provider.

    Usage:
        provider = ImageProvider()
        result = await provider.generate("Minimal desk setup, soft light", aspect_ratio="16:9")
        refined = await provider.refine(prompt, source_bytes, references=[logo_bytes])
    """

    def __init__(self, config: ProviderConfig | None = None, event_callback: AIEventCallback = None):
        """Initialize image provider.

        Args:
            config: Provider configuration. If None, loads from default config file.
            event_callback: Optional callback for AI events (for progress tracking).
        """
        self.config = config or load_provider_config()
        self._current_provider: str | None = None
        self._current_model: str | None = None
        self._event_callback = event_callback
        self._total_calls = 0

    async def _emit_event(self, event: dict[str, Any]) -> None:
        """Emit an AI event if callback is set."""
        if self._event_callback:
            await self._event_callback(event)

    @property
    def timeout_seconds(self) -> int:
        return self.config.provider_settings.timeout_seconds

    async def generate(
        self,
        prompt: str,
        aspect_ratio: str = DEFAULT_ASPECT_RATIO,
        references: list[bytes] | None = None,
        task: str | None = None,
    ) -> ImageResult:
        """Generate an image from a prompt.

        Args:
            prompt: Text description of the image.
            aspect_ratio: One of the supported ratios ("1:1", "16:9", ...).
            references: Optional reference images to guide the result.
            task: Optional task name for tracking.

        Returns:
            ImageResult with the generated image(s) or backend text.

        Raises:
            ProviderTimeoutError: If the last backend tried timed out.
        """
        return await self._run(prompt, aspect_ratio, list(references or []), task or "generate_image")

    async def refine(
        self,
        prompt: str,
        source: bytes,
        references: list[bytes] | None = None,
        aspect_ratio: str = DEFAULT_ASPECT_RATIO,
        task: str | None = None,
    ) -> ImageResult:
        """Produce a new image from an existing one and an instruction.

        The source image goes first in the image list so edit models treat
        it as the base, references follow.
        """
        images = [source, *(references or [])]
        return await self._run(prompt, aspect_ratio, images, task or "refine_image")

    async def _run(
        self,
        prompt: str,
        aspect_ratio: str,
        images: list[bytes],
        task: str,
    ) -> ImageResult:
        providers = self.config.image_chain()
        if not providers:
            raise RuntimeError("No image providers are enabled")

        size = IMAGE_SIZES.get(aspect_ratio, IMAGE_SIZES[DEFAULT_ASPECT_RATIO])
        last_error: Exception | None = None
        failed_providers: list[str] = []

        for provider_name, provider_config in providers:
            try:
                self._current_provider = provider_name
                self._current_model = provider_config.model

                await self._emit_event({
                    "type": "image_call",
                    "provider": provider_name,
                    "model": provider_config.model,
                    "prompt_preview": prompt[:200],
                    "aspect_ratio": aspect_ratio,
                    "task": task,
                    "failed_providers": failed_providers.copy(),
                })
                _logger.info(
                    f"IMAGE_REQUEST | provider:{provider_name} | model:{provider_config.model} | "
                    f"task:{task} | aspect:{aspect_ratio} | images_in:{len(images)}\n"
                    f"--- PROMPT ---\n{prompt}\n"
                    f"--- END REQUEST ---"
                )

                start_time = time.time()
                if provider_config.type == "fal":
                    call = self._generate_fal(provider_config, prompt, size, images)
                elif provider_config.type == "openai":
                    call = self._generate_openai(provider_config, prompt, size, images)
                else:
                    raise ValueError(f"Unknown provider type: {provider_config.type}")

                try:
                    result = await asyncio.wait_for(call, timeout=self.timeout_seconds)
                except asyncio.TimeoutError:
                    _logger.error(f"AI_TIMEOUT | operation:{task} | timeout:{self.timeout_seconds}s")
                    raise ProviderTimeoutError(task, self.timeout_seconds) from None

                duration = time.time() - start_time
                self._total_calls += 1
                _logger.info(
                    f"IMAGE_RESPONSE | provider:{provider_name} | model:{provider_config.model} | "
                    f"duration:{duration:.2f}s | images:{len(result.images)} | text:{bool(result.text)}"
                )
                await self._emit_event({
                    "type": "image_response",
                    "provider": provider_name,
                    "model": provider_config.model,
                    "duration_seconds": duration,
                    "total_calls": self._total_calls,
                    "images": len(result.images),
                })
                return result

            except Exception as e:
                last_error = e
                failed_providers.append(provider_name)
                _logger.warning(f"IMAGE_ERROR | provider:{provider_name} | error:{e}")
                await self._emit_event({
                    "type": "image_error",
                    "provider": provider_name,
                    "error": str(e)[:100],
                    "failed_providers": failed_providers.copy(),
                })
                if self.config.provider_settings.fallback_on_error:
                    continue
                raise

        raise last_error or RuntimeError("No image providers available")

    @retry(
        retry=retry_if_exception_type(httpx.HTTPError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _download(self, url: str) -> bytes:
        """Download a generated image."""
        async with httpx.AsyncClient(timeout=DOWNLOAD_TIMEOUT_SECONDS) as client:
            response = await client.get(url)
        response.raise_for_status()
        return response.content

    async def _generate_fal(
        self,
        config: ImageProviderConfig,
        prompt: str,
        size: tuple[int, int],
        images: list[bytes],
    ) -> ImageResult:
        """Generate image using fal.ai API."""
        import fal_client

        api_key = config.get_api_key()
        if not api_key:
            raise ValueError("FAL_KEY not set")
        os.environ["FAL_KEY"] = api_key

        width, height = size
        request_data: dict[str, Any] = {"prompt": prompt, **config.settings}
        model = config.model
        if images:
            # Edit models take hosted image URLs
            model = config.edit_model or config.model
            request_data["image_urls"] = [
                await asyncio.to_thread(fal_client.upload, data, "image/png")
                for data in images
            ]
        else:
            request_data["image_size"] = {"width": width, "height": height}

        result = await asyncio.to_thread(fal_client.subscribe, model, arguments=request_data)

        urls: list[str] = []
        if result.get("images"):
            urls = [image["url"] for image in result["images"]]
        elif "image" in result:
            urls = [result["image"]["url"]]

        downloaded = [GeneratedImageData.from_bytes(await self._download(url)) for url in urls]
        return ImageResult(images=downloaded, text=result.get("description") or None)

    async def _generate_openai(
        self,
        config: ImageProviderConfig,
        prompt: str,
        size: tuple[int, int],
        images: list[bytes],
    ) -> ImageResult:
        """Generate image using the OpenAI images API."""
        from openai import AsyncOpenAI

        api_key = config.get_api_key()
        if not api_key:
            raise ValueError("OPENAI_API_KEY not set")

        client = AsyncOpenAI(api_key=api_key, base_url=config.get_base_url())
        width, height = size
        openai_size = f"{width}x{height}"

        if images:
            response = await client.images.edit(
                model=config.edit_model or config.model,
                image=[(f"image_{i}.png", data, "image/png") for i, data in enumerate(images)],
                prompt=prompt,
                n=1,
                **config.settings,
            )
        else:
            response = await client.images.generate(
                model=config.model,
                prompt=prompt,
                size=openai_size,
                n=1,
                **config.settings,
            )

        results: list[GeneratedImageData] = []
        for item in response.data or []:
            if item.b64_json:
                data = base64.b64decode(item.b64_json)
            elif item.url:
                data = await self._download(item.url)
            else:
                continue
            results.append(GeneratedImageData.from_bytes(data))

        revised = next((item.revised_prompt for item in response.data or [] if item.revised_prompt), None)
        return ImageResult(images=results, text=revised if not results else None)

    @property
    def current_provider(self) -> str | None:
        """Get the name of the last used provider."""
        return self._current_provider
