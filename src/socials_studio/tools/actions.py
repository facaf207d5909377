"""Typed actions parsed from the assistant's tool invocations.

Each tool in TOOL_SCHEMAS has a pydantic model here. An invocation whose
name is unknown or whose required fields are missing or mistyped is
dropped (logged as ACTION_DROPPED); the remaining invocations are kept.
Scalar fields are strict: ``"1"`` or ``true`` is not an index. Enum
fields accept their string values.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, ClassVar, Iterable, Literal, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr, ValidationError, field_validator

from ..constants import DEFAULT_ASPECT_RATIO, ContentType, SlideField
from ..errors import MalformedActionError

_logger = logging.getLogger("actions")


class ActionCategory(str, Enum):
    """How the executor handles an action."""

    CONTENT = "content"
    """Applied to the Output."""

    CAROUSEL = "carousel"
    """Applied to the CarouselOutput."""

    IMAGE = "image"
    """Calls the image backend and stores a GeneratedImage."""

    DEFERRED = "deferred"
    """Needs another generation call; returned to the caller as a follow-up."""


class BaseAction(BaseModel):
    """Fields shared by all actions."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    category: ClassVar[ActionCategory]


class _ImageOptions(BaseAction):
    use_references: StrictBool = False

    @field_validator("use_references", mode="before")
    @classmethod
    def _default_references(cls, value: Any) -> Any:
        return False if value is None else value


# =============================================================================
# Content
# =============================================================================


class EditCardAction(BaseAction):
    category = ActionCategory.CONTENT

    type: Literal["edit_card"] = "edit_card"
    content_type: ContentType
    index: StrictInt
    new_content: StrictStr


class RemoveCardAction(BaseAction):
    category = ActionCategory.CONTENT

    type: Literal["remove_card"] = "remove_card"
    content_type: ContentType
    index: StrictInt


class SelectCardAction(BaseAction):
    category = ActionCategory.CONTENT

    type: Literal["select_card"] = "select_card"
    content_type: ContentType
    index: StrictInt


class RegenerateSectionAction(BaseAction):
    category = ActionCategory.DEFERRED

    type: Literal["regenerate_section"] = "regenerate_section"
    content_type: ContentType


class AddMoreAction(BaseAction):
    category = ActionCategory.DEFERRED

    type: Literal["add_more"] = "add_more"
    content_type: ContentType


# =============================================================================
# Images
# =============================================================================


class GenerateImageAction(_ImageOptions):
    category = ActionCategory.IMAGE

    type: Literal["generate_image"] = "generate_image"
    prompt: StrictStr
    aspect_ratio: StrictStr = DEFAULT_ASPECT_RATIO

    @field_validator("aspect_ratio", mode="before")
    @classmethod
    def _default_ratio(cls, value: Any) -> Any:
        return value or DEFAULT_ASPECT_RATIO


class RefineImageAction(_ImageOptions):
    category = ActionCategory.IMAGE

    type: Literal["refine_image"] = "refine_image"
    image_id: StrictStr
    refinement_prompt: StrictStr


class GenerateThumbnailAction(_ImageOptions):
    category = ActionCategory.IMAGE

    type: Literal["generate_thumbnail"] = "generate_thumbnail"
    prompt: StrictStr
    thumbnail_index: StrictInt
    aspect_ratio: StrictStr = DEFAULT_ASPECT_RATIO

    @field_validator("aspect_ratio", mode="before")
    @classmethod
    def _default_ratio(cls, value: Any) -> Any:
        return value or DEFAULT_ASPECT_RATIO


# =============================================================================
# Carousel
# =============================================================================


class EditCarouselSlideAction(BaseAction):
    category = ActionCategory.CAROUSEL

    type: Literal["edit_carousel_slide"] = "edit_carousel_slide"
    slide_index: StrictInt
    field: SlideField
    value: StrictStr


class SetSlideImageAction(BaseAction):
    category = ActionCategory.CAROUSEL

    type: Literal["set_slide_image"] = "set_slide_image"
    slide_index: StrictInt
    asset_id: StrictStr


class RemoveSlideImageAction(BaseAction):
    category = ActionCategory.CAROUSEL

    type: Literal["remove_slide_image"] = "remove_slide_image"
    slide_index: StrictInt


Action = Union[
    EditCardAction,
    RemoveCardAction,
    SelectCardAction,
    RegenerateSectionAction,
    AddMoreAction,
    GenerateImageAction,
    RefineImageAction,
    GenerateThumbnailAction,
    EditCarouselSlideAction,
    SetSlideImageAction,
    RemoveSlideImageAction,
]

ACTION_MODELS: dict[str, type[BaseAction]] = {
    model.model_fields["type"].default: model
    for model in Action.__args__
}
"""Tool name -> action model."""


def parse_action(name: str, arguments: dict[str, Any] | None) -> Action:
    """Build a typed action from one tool invocation.

    Raises:
        MalformedActionError: If the name is unknown or the arguments do
            not satisfy the action's schema.
    """
    model = ACTION_MODELS.get(name)
    if model is None:
        raise MalformedActionError(f"Unknown action: {name}")

    payload = dict(arguments or {})
    payload.pop("type", None)
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise MalformedActionError(f"Invalid {name} arguments: {problems}") from e


def parse_tool_calls(calls: Iterable[Any]) -> list[Action]:
    """Convert tool invocations into actions, dropping malformed ones.

    Args:
        calls: Objects with ``name`` and ``arguments`` attributes
            (e.g. ToolInvocation), in the order the model emitted them.

    Returns:
        Valid actions in their original order.
    """
    actions: list[Action] = []
    for call in calls:
        try:
            actions.append(parse_action(call.name, call.arguments))
        except MalformedActionError as e:
            _logger.warning(f"ACTION_DROPPED | action:{call.name} | reason:{e}")
    return actions
