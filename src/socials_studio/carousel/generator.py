"""Carousel slide generation from post content.

The prompt carries the narrative arc: slide 1 is the hook, the last slide
is the call to action, every slide in between makes one point. Results
are checked for slide count and headline presence only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..constants import CAROUSEL_BODY_MAX_WORDS, CAROUSEL_HEADLINE_MAX_WORDS, DEFAULT_SLIDE_COUNT
from ..content.responses import CarouselResponse
from ..errors import UnavailableError, UnsupportedError
from .models import Slide

if TYPE_CHECKING:
    from ..providers.text import TextProvider

_logger = logging.getLogger("ai_calls")


CAROUSEL_GENERATION_PROMPT = f"""You are an expert content strategist specializing in engaging carousel content for LinkedIn and social media.

Break the given content into a compelling carousel with the requested number of slides.

Structure:
- Slide 1: Hook - the single most compelling insight or question
- Slides 2 to N-1: Key points - one clear, actionable point per slide
- Slide N: Call to action or memorable takeaway

For each slide provide:
1. headline: bold, punchy text (max {CAROUSEL_HEADLINE_MAX_WORDS} words)
2. body: supporting text expanding the headline (max {CAROUSEL_BODY_MAX_WORDS} words), optional
3. cta: only on the last slide
4. visual_prompt: a description for generating an image that complements the slide

Rules:
- Each headline works standalone as a scroll-stopping statement
- Keep text concise, carousels are visual-first
- Build a narrative arc across slides"""


class SlideGenerator:
    """Turns source content into carousel slides with the text provider."""

    def __init__(self, text_provider: TextProvider):
        self.text_provider = text_provider

    async def generate(self, source_content: str, slide_count: int = DEFAULT_SLIDE_COUNT) -> list[Slide]:
        """Generate slides.

        Args:
            source_content: Text to turn into a carousel.
            slide_count: Number of slides wanted (at least 2: hook and CTA).

        Returns:
            Slides with fresh ids and positions 0..n-1.

        Raises:
            UnsupportedError: If slide_count is below 2.
            UnavailableError: If the model returns too few slides or a slide
                without a headline.
        """
        if slide_count < 2:
            raise UnsupportedError("A carousel needs at least 2 slides")

        prompt = (
            f"Number of slides: {slide_count}\n\n"
            f"Content to transform into carousel:\n---\n{source_content}\n---"
        )
        result = await self.text_provider.generate_structured(
            prompt=prompt,
            response_model=CarouselResponse,
            system=CAROUSEL_GENERATION_PROMPT,
            task="carousel_generation",
        )

        generated = result.slides
        if len(generated) < slide_count:
            raise UnavailableError(
                f"Model returned {len(generated)} slides, expected {slide_count}"
            )
        if len(generated) > slide_count:
            _logger.warning(
                f"CAROUSEL_TRIMMED | returned:{len(generated)} | expected:{slide_count}"
            )
            generated = generated[:slide_count]

        slides = []
        for index, data in enumerate(generated):
            if not data.headline.strip():
                raise UnavailableError(f"Slide {index + 1} has no headline")
            slides.append(Slide(
                position=index,
                headline=data.headline.strip(),
                body=data.body,
                cta=data.cta,
                visual_prompt=data.visual_prompt,
            ))
        return slides
