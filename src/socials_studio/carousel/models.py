"""Data models for carousels and imported templates."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from ..constants import TextZoneType
from ..storage import StoredModel
from ..utils import generate_id, now_utc


class Slide(BaseModel):
    """One page of a carousel.

    ``position`` always equals the slide's index in ``CarouselOutput.slides``;
    CarouselOutput renumbers it on every change.
    """

    id: str = Field(default_factory=generate_id)
    position: int = 0
    headline: str = ""
    body: str | None = None
    cta: str | None = None
    image_id: str | None = None
    visual_prompt: str | None = None


class CarouselOutput(StoredModel):
    """The carousel of a project (at most one per project)."""

    collection = "carousel_outputs"

    project_id: str
    template_id: str | None = None
    slides: list[Slide] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)

    @model_validator(mode="after")
    def _dense_positions(self) -> CarouselOutput:
        self.renumber()
        return self

    def renumber(self) -> None:
        """Set every slide's position from its index."""
        for index, slide in enumerate(self.slides):
            slide.position = index


class TextZone(BaseModel):
    """Rectangle on a 1080x1080 template where slide text is drawn."""

    id: str = Field(default_factory=generate_id)
    type: TextZoneType
    x: float
    y: float
    width: float
    height: float
    fontSize: int = 36
    fontFamily: str | None = None
    fontWeight: Literal["normal", "bold"] = "normal"
    color: str = "#000000"
    textAlign: Literal["left", "center", "right"] = "center"
    lineHeight: float | None = None

    @field_validator("width", "height")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Zone dimensions must be positive")
        return value


class CarouselTemplate(StoredModel):
    """An imported set of slide backgrounds."""

    collection = "carousel_templates"

    name: str
    slide_count: int = 0
    created_at: datetime = Field(default_factory=now_utc)


class TemplateSlide(StoredModel):
    """One background of a template and the text zones drawn on it."""

    collection = "template_slides"
    blob_field = "background"

    template_id: str
    position: int
    background: bytes | None = Field(default=None, exclude=True)
    text_zones: list[TextZone] = Field(default_factory=list)
