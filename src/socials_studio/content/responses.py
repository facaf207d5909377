"""Pydantic response models for AI extraction.

These models define the exact structure expected from AI responses; the
text provider passes them as the agent's output schema.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class VisualConceptItem(BaseModel):
    """One visual concept description."""

    description: str = Field(
        description="Image or graphic that complements the post, described for a designer"
    )


class FullContentResponse(BaseModel):
    """Every section of a post, generated in one call.

    Sections a platform does not use are left empty.
    """

    hooks: list[str] = Field(
        default_factory=list, description="Attention-grabbing opening lines (1-2 sentences each)"
    )
    body_content: str = Field(
        default="", description="Main post body, 150-300 words in short paragraphs"
    )
    intros: list[str] = Field(
        default_factory=list, description="Video intro scripts for the first 10 seconds"
    )
    titles: list[str] = Field(
        default_factory=list, description="Compelling titles"
    )
    ctas: list[str] = Field(
        default_factory=list, description="Clear calls to action"
    )
    visual_concepts: list[VisualConceptItem] = Field(
        default_factory=list, description="Visual concept / thumbnail ideas"
    )


class SectionItemsResponse(BaseModel):
    """New options for a single list section."""

    items: list[str] = Field(
        min_length=1, description="New options, each different from the existing ones"
    )


class BodyResponse(BaseModel):
    """New body content."""

    body: str = Field(
        min_length=1, description="Body content, 150-300 words in short paragraphs"
    )


class VisualConceptsResponse(BaseModel):
    """New visual concepts."""

    concepts: list[VisualConceptItem] = Field(min_length=1)


class CarouselSlideResponse(BaseModel):
    """One carousel slide."""

    headline: str = Field(description="Slide headline, max 8 words")
    body: str | None = Field(default=None, description="Supporting text, max 25 words")
    cta: str | None = Field(default=None, description="Call to action (last slide only)")
    visual_prompt: str | None = Field(
        default=None, description="Image generation prompt for the slide background"
    )


class CarouselResponse(BaseModel):
    """A full carousel narrative."""

    slides: list[CarouselSlideResponse] = Field(min_length=1)
