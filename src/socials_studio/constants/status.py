"""Status enums and state constants for Socials Studio.

This module contains the enums that describe a project's state:
- Platforms and project lifecycle
- Workflow steps
- Content types and who edited them
- Carousel slide fields and text zone kinds

AI CONTEXT:
-----------
Projects move through a per-platform ordered list of workflow steps:
  SETUP -> HOOKS -> ... -> COMPLETE

Which steps exist for a platform lives in socials_studio.workflow.machine.
Selection indices use sentinel values (NO_SELECTION, SKIPPED) instead of
None so they survive a round-trip through JSON unchanged.

MODIFICATION GUIDE:
------------------
- Add new enum values at the END to maintain backwards compatibility
- A new ContentType must also be added to content.fields.CONTENT_FIELDS,
  which refuses to import otherwise
"""

from enum import Enum
from typing import Final


# =============================================================================
# PLATFORMS & PROJECT LIFECYCLE
# =============================================================================

class Platform(str, Enum):
    """Target platform for a project."""

    LINKEDIN = "linkedin"
    """Text post with hook, body, CTA and an image. Carousel capable."""

    YOUTUBE = "youtube"
    """Video package: hooks, intro scripts, titles and thumbnails."""

    FACEBOOK = "facebook"
    """Same shape as LinkedIn with a more casual tone. Carousel capable."""


class ProjectStatus(str, Enum):
    """Lifecycle status of a project.

    Workflow:
        IN_PROGRESS -> COMPLETE -> PUBLISHED
    """

    IN_PROGRESS = "in_progress"
    """Content is still being worked on."""

    COMPLETE = "complete"
    """All workflow steps are done."""

    PUBLISHED = "published"
    """Content was posted by the user."""


# =============================================================================
# WORKFLOW
# =============================================================================

class WorkflowStep(str, Enum):
    """A position in a platform's workflow."""

    SETUP = "setup"
    HOOKS = "hooks"
    BODY = "body"
    INTROS = "intros"
    TITLES = "titles"
    CTAS = "ctas"
    VISUALS = "visuals"
    THUMBNAILS = "thumbnails"
    CAROUSEL = "carousel"
    COMPLETE = "complete"


# =============================================================================
# CONTENT
# =============================================================================

class ContentType(str, Enum):
    """Kind of generated content an action or edit targets."""

    HOOK = "hook"
    """Opening lines that stop the scroll."""

    BODY = "body"
    """Main post body. A single string, not a list."""

    INTRO = "intro"
    """Video introduction scripts (YouTube)."""

    TITLE = "title"
    """Post or video titles."""

    CTA = "cta"
    """Calls to action."""

    VISUAL = "visual"
    """Visual concepts, also used as thumbnail slots."""


class EditedBy(str, Enum):
    """Who made a content edit."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageRole(str, Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class SourceType(str, Enum):
    """How a research source was added to a project."""

    TEXT = "text"
    URL = "url"
    FILE = "file"


# =============================================================================
# CAROUSEL
# =============================================================================

class SlideField(str, Enum):
    """Editable text fields of a carousel slide."""

    HEADLINE = "headline"
    BODY = "body"
    CTA = "cta"
    VISUAL_PROMPT = "visual_prompt"


class TextZoneType(str, Enum):
    """Which slide text a template zone receives."""

    HEADLINE = "headline"
    BODY = "body"
    CTA = "cta"


class TemplateFileType(str, Enum):
    """Accepted template upload kinds."""

    PDF = "pdf"
    ZIP = "zip"
    IMAGE = "image"


# =============================================================================
# SELECTION SENTINELS
# =============================================================================

NO_SELECTION: Final[int] = -1
"""Selection index meaning nothing has been chosen yet."""

SKIPPED: Final[int] = -2
"""Selection index meaning the user explicitly chose none (CTA only)."""
