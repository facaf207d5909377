"""Tool definitions for assistant function calling.

Defines the closed set of actions the assistant model may invoke to change
a project's content, carousel and images. Uses OpenAI function calling
format.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from ..constants import ASPECT_RATIOS, ContentType, SlideField


@dataclass
class ActionResult:
    """Result of applying one action."""

    action: str
    success: bool
    result: Any = None
    error: str | None = None
    duration_ms: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_message(self) -> str:
        """Convert result to a short human readable line."""
        if not self.success:
            return f"Action '{self.action}' failed: {self.error}"

        if isinstance(self.result, str):
            return self.result

        return json.dumps(self.result, indent=2, ensure_ascii=False, default=str)


_CONTENT_TYPES = [content_type.value for content_type in ContentType]


def _content_type_property(description: str) -> dict[str, Any]:
    return {"type": "string", "enum": _CONTENT_TYPES, "description": description}


_SLIDE_INDEX = {
    "type": "integer",
    "description": "0-based slide index (slide 1 is index 0)",
}

_USE_REFERENCES = {
    "type": "boolean",
    "description": (
        "Include the project's uploaded reference images (logos, brand photos, "
        "style samples) as guidance. Default: false"
    ),
}

_ASPECT_RATIO = {
    "type": "string",
    "enum": list(ASPECT_RATIOS),
    "description": "Image aspect ratio. Default: 1:1",
}


def _function(name: str, description: str, properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        },
    }


# Tool schemas in OpenAI function calling format
TOOL_SCHEMAS = [
    # Content
    _function(
        "edit_card",
        "Replace the text of one card. Use when the user asks to change, rewrite or improve a specific item.",
        {
            "content_type": _content_type_property("Section the card belongs to"),
            "index": {"type": "integer", "description": "0-based card index (card 1 is index 0)"},
            "new_content": {"type": "string", "description": "Full replacement text for the card"},
        },
        ["content_type", "index", "new_content"],
    ),
    _function(
        "remove_card",
        "Delete one card from a section. The body cannot be removed.",
        {
            "content_type": _content_type_property("Section the card belongs to"),
            "index": {"type": "integer", "description": "0-based card index"},
        },
        ["content_type", "index"],
    ),
    _function(
        "select_card",
        "Mark one card as the chosen option for its section. Index -1 clears the choice.",
        {
            "content_type": _content_type_property("Section the card belongs to"),
            "index": {"type": "integer", "description": "0-based card index, or -1 for no selection"},
        },
        ["content_type", "index"],
    ),
    _function(
        "regenerate_section",
        "Replace every option in a section with freshly generated ones.",
        {"content_type": _content_type_property("Section to regenerate")},
        ["content_type"],
    ),
    _function(
        "add_more",
        "Generate additional options for a section, keeping the existing ones.",
        {"content_type": _content_type_property("Section to extend")},
        ["content_type"],
    ),
    # Images
    _function(
        "generate_image",
        (
            "Generate a standalone image that is not tied to a thumbnail slot. "
            "For a specific thumbnail slot use generate_thumbnail instead."
        ),
        {
            "prompt": {"type": "string", "description": "Detailed description of the image to create"},
            "use_references": _USE_REFERENCES,
            "aspect_ratio": _ASPECT_RATIO,
        },
        ["prompt"],
    ),
    _function(
        "refine_image",
        (
            "Create a modified version of an existing generated image. "
            "Requires an image_id from the Thumbnails context."
        ),
        {
            "image_id": {"type": "string", "description": "ID of the generated image to refine"},
            "refinement_prompt": {
                "type": "string",
                "description": "What to change, e.g. 'warmer background', 'remove the text'",
            },
            "use_references": _USE_REFERENCES,
        },
        ["image_id", "refinement_prompt"],
    ),
    _function(
        "generate_thumbnail",
        (
            "Generate an image for a numbered thumbnail slot. Thumbnail 1 is the first "
            "visual concept, thumbnail 2 the second, and so on."
        ),
        {
            "prompt": {"type": "string", "description": "Detailed description of the image to create"},
            "thumbnail_index": {"type": "integer", "description": "1-based thumbnail slot"},
            "use_references": _USE_REFERENCES,
            "aspect_ratio": _ASPECT_RATIO,
        },
        ["prompt", "thumbnail_index"],
    ),
    # Carousel
    _function(
        "edit_carousel_slide",
        "Change one text field of a carousel slide.",
        {
            "slide_index": _SLIDE_INDEX,
            "field": {
                "type": "string",
                "enum": [slide_field.value for slide_field in SlideField],
                "description": "Slide field to change",
            },
            "value": {"type": "string", "description": "New text for the field"},
        },
        ["slide_index", "field", "value"],
    ),
    _function(
        "set_slide_image",
        "Place one of the project's reference images on a carousel slide.",
        {
            "slide_index": _SLIDE_INDEX,
            "asset_id": {"type": "string", "description": "ID from the Reference Images context"},
        },
        ["slide_index", "asset_id"],
    ),
    _function(
        "remove_slide_image",
        "Clear the image from a carousel slide.",
        {"slide_index": _SLIDE_INDEX},
        ["slide_index"],
    ),
]


# Tool name to schema mapping for quick lookup
AVAILABLE_TOOLS = {
    schema["function"]["name"]: schema
    for schema in TOOL_SCHEMAS
}
