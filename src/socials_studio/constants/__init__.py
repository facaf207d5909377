"""Global constants package for Socials Studio.

PACKAGE STRUCTURE:
-----------------
- status.py   : Platform, workflow, content and carousel enums, sentinels
- limits.py   : Timeouts, context sizes, canvas geometry, image sizes

USAGE EXAMPLES:
--------------
    from socials_studio.constants import Platform, ContentType, NO_SELECTION
    from socials_studio.constants import CANVAS_SIZE, MODEL_TIMEOUT_SECONDS
"""

from .status import (
    Platform,
    ProjectStatus,
    WorkflowStep,
    ContentType,
    EditedBy,
    MessageRole,
    SourceType,
    SlideField,
    TextZoneType,
    TemplateFileType,
    NO_SELECTION,
    SKIPPED,
)
from .limits import (
    MODEL_TIMEOUT_SECONDS,
    ASSISTANT_MAX_TOKENS,
    CONTEXT_SOURCES_MAX_CHARS,
    CONTEXT_HISTORY_MESSAGES,
    THUMBNAIL_MATCH_PREFIX_CHARS,
    TRUNCATION_MARKER,
    DEFAULT_ITEMS_PER_SECTION,
    DEFAULT_SLIDE_COUNT,
    CAROUSEL_HEADLINE_MAX_WORDS,
    CAROUSEL_BODY_MAX_WORDS,
    CANVAS_SIZE,
    ZONE_MIN_WIDTH,
    ZONE_MIN_HEIGHT,
    PDF_PLACEHOLDER_SLIDES,
    PDF_PLACEHOLDER_COLOR,
    ASPECT_RATIOS,
    DEFAULT_ASPECT_RATIO,
    IMAGE_SIZES,
    UPSCALE_ASPECT_RATIO,
    UPSCALE_PROMPT_SUFFIX,
    IMAGE_MODEL,
    UPSCALED_IMAGE_MODEL,
)

__all__ = [
    # Status
    "Platform",
    "ProjectStatus",
    "WorkflowStep",
    "ContentType",
    "EditedBy",
    "MessageRole",
    "SourceType",
    "SlideField",
    "TextZoneType",
    "TemplateFileType",
    "NO_SELECTION",
    "SKIPPED",
    # Limits
    "MODEL_TIMEOUT_SECONDS",
    "ASSISTANT_MAX_TOKENS",
    "CONTEXT_SOURCES_MAX_CHARS",
    "CONTEXT_HISTORY_MESSAGES",
    "THUMBNAIL_MATCH_PREFIX_CHARS",
    "TRUNCATION_MARKER",
    "DEFAULT_ITEMS_PER_SECTION",
    "DEFAULT_SLIDE_COUNT",
    "CAROUSEL_HEADLINE_MAX_WORDS",
    "CAROUSEL_BODY_MAX_WORDS",
    "CANVAS_SIZE",
    "ZONE_MIN_WIDTH",
    "ZONE_MIN_HEIGHT",
    "PDF_PLACEHOLDER_SLIDES",
    "PDF_PLACEHOLDER_COLOR",
    "ASPECT_RATIOS",
    "DEFAULT_ASPECT_RATIO",
    "IMAGE_SIZES",
    "UPSCALE_ASPECT_RATIO",
    "UPSCALE_PROMPT_SUFFIX",
    "IMAGE_MODEL",
    "UPSCALED_IMAGE_MODEL",
]
