"""Data models for projects and generated content."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

from ..constants import (
    ASPECT_RATIOS,
    DEFAULT_ASPECT_RATIO,
    IMAGE_MODEL,
    NO_SELECTION,
    EditedBy,
    MessageRole,
    Platform,
    ProjectStatus,
    SourceType,
    WorkflowStep,
)
from ..storage import StoredModel
from ..utils import now_utc, safe_json_parse


class VisualConcept(BaseModel):
    """A described image idea, also the slot a thumbnail is generated for."""

    description: str


class Project(StoredModel):
    """A piece of content being produced for one platform."""

    collection = "projects"

    name: str
    topic: str
    platform: Platform
    target_audience: str | None = None
    content_style: str | None = None
    status: ProjectStatus = ProjectStatus.IN_PROGRESS
    current_step: WorkflowStep = WorkflowStep.SETUP
    remix_of_project_id: str | None = None
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)


_STRING_LIST_FIELDS = (
    "hooks", "hooks_original",
    "intros", "intros_original",
    "titles", "titles_original",
    "ctas", "ctas_original",
)
_VISUAL_FIELDS = ("visual_concepts", "visual_concepts_original")


class Output(StoredModel):
    """Generated content for a project.

    Every list section has a working copy, an ``_original`` snapshot taken
    when its items were first generated, and a selected index. Body is a
    single string. List fields are stored as JSON text and parsed
    leniently: anything unreadable becomes an empty list.
    """

    collection = "outputs"

    project_id: str

    hooks: list[str] = Field(default_factory=list)
    hooks_original: list[str] = Field(default_factory=list)
    body_content: str = ""
    body_content_original: str = ""
    intros: list[str] = Field(default_factory=list)
    intros_original: list[str] = Field(default_factory=list)
    titles: list[str] = Field(default_factory=list)
    titles_original: list[str] = Field(default_factory=list)
    ctas: list[str] = Field(default_factory=list)
    ctas_original: list[str] = Field(default_factory=list)
    visual_concepts: list[VisualConcept] = Field(default_factory=list)
    visual_concepts_original: list[VisualConcept] = Field(default_factory=list)

    selected_hook_index: int = NO_SELECTION
    selected_body_index: int = NO_SELECTION
    selected_intro_index: int = NO_SELECTION
    selected_title_index: int = NO_SELECTION
    selected_cta_index: int = NO_SELECTION
    selected_visual_index: int = NO_SELECTION

    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)

    @field_validator(*_STRING_LIST_FIELDS, mode="before")
    @classmethod
    def _parse_string_list(cls, value: Any) -> list[str]:
        items = safe_json_parse(value, [])
        return [item for item in items if isinstance(item, str)]

    @field_validator(*_VISUAL_FIELDS, mode="before")
    @classmethod
    def _parse_visual_list(cls, value: Any) -> list[Any]:
        items = safe_json_parse(value, [])
        concepts = []
        for item in items:
            if isinstance(item, str):
                concepts.append({"description": item})
            elif isinstance(item, VisualConcept):
                concepts.append(item)
            elif isinstance(item, dict) and isinstance(item.get("description"), str):
                concepts.append({"description": item["description"]})
        return concepts

    @field_validator("body_content", "body_content_original", mode="before")
    @classmethod
    def _parse_body(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_serializer(*_STRING_LIST_FIELDS, when_used="json")
    def _dump_string_list(self, value: list[str]) -> str:
        return json.dumps(value)

    @field_serializer(*_VISUAL_FIELDS, when_used="json")
    def _dump_visual_list(self, value: list[VisualConcept]) -> str:
        return json.dumps([concept.model_dump() for concept in value])


class ContentVersion(StoredModel):
    """Append-only record of one edit to a single content item."""

    collection = "content_versions"

    project_id: str
    content_type: str
    content_index: int
    old_content: str
    new_content: str
    edited_by: EditedBy = EditedBy.USER
    created_at: datetime = Field(default_factory=now_utc)


class Message(StoredModel):
    """One turn of the assistant conversation."""

    collection = "messages"

    project_id: str
    role: MessageRole
    content: str
    created_at: datetime = Field(default_factory=now_utc)


class ProjectAsset(StoredModel):
    """A user-uploaded reference image (logo, brand photo, style sample)."""

    collection = "project_assets"
    blob_field = "data"

    project_id: str
    filename: str
    mime_type: str = "image/png"
    data: bytes | None = Field(default=None, exclude=True)
    created_at: datetime = Field(default_factory=now_utc)


class ProjectSource(StoredModel):
    """Research material included in the assistant's context."""

    collection = "project_sources"

    project_id: str
    title: str
    content: str
    source_type: SourceType = SourceType.TEXT
    enabled: bool = True
    created_at: datetime = Field(default_factory=now_utc)


class GeneratedImage(StoredModel):
    """An image produced by the image backend.

    ``parent_image_id`` links refinements and upscales to the image they
    were derived from.
    """

    collection = "generated_images"
    blob_field = "image_bytes"

    project_id: str
    prompt: str
    image_bytes: bytes | None = Field(default=None, exclude=True)
    width: int = 0
    height: int = 0
    model: str = IMAGE_MODEL
    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    is_upscaled: bool = False
    parent_image_id: str | None = None
    visual_concept_index: int | None = None
    created_at: datetime = Field(default_factory=now_utc)

    @field_validator("aspect_ratio")
    @classmethod
    def _known_ratio(cls, value: str) -> str:
        if value not in ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio: {value}")
        return value


class Setting(StoredModel):
    """A prompt-layer setting. The id is the setting key."""

    collection = "settings"

    value: str
    updated_at: datetime = Field(default_factory=now_utc)
