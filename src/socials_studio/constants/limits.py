"""Limit constants for Socials Studio.

This module contains all limits and constraints:
- External call budgets
- Assistant context sizes
- Carousel canvas geometry
- Image sizes per aspect ratio

AI CONTEXT:
-----------
The carousel coordinate space is a fixed 1080x1080 square. Template
backgrounds are normalized into it and text zones are stored in it, so
rendering never needs to rescale zone geometry.

MODIFICATION GUIDE:
------------------
- MODEL_* settings: keep in step with ProviderSettings.timeout_seconds
- CANVAS_* values: changing them invalidates stored text zones
"""

from typing import Final

# =============================================================================
# EXTERNAL CALLS
# =============================================================================

MODEL_TIMEOUT_SECONDS: Final[int] = 60
"""Budget for a single LLM or image call before it is abandoned."""

ASSISTANT_MAX_TOKENS: Final[int] = 4096
"""Max output tokens for an assistant turn."""

# =============================================================================
# ASSISTANT CONTEXT
# =============================================================================

CONTEXT_SOURCES_MAX_CHARS: Final[int] = 6000
"""Total characters of research sources included in assistant context."""

CONTEXT_HISTORY_MESSAGES: Final[int] = 10
"""Number of prior conversation turns sent to the model."""

THUMBNAIL_MATCH_PREFIX_CHARS: Final[int] = 50
"""Prefix length used to match an image prompt to a visual concept."""

TRUNCATION_MARKER: Final[str] = "...[truncated]"
"""Appended where source text was cut."""

# =============================================================================
# CONTENT GENERATION
# =============================================================================

DEFAULT_ITEMS_PER_SECTION: Final[int] = 3
"""Items produced per list section by a generation call."""

DEFAULT_SLIDE_COUNT: Final[int] = 5
"""Carousel slides generated when no count or template is given."""

CAROUSEL_HEADLINE_MAX_WORDS: Final[int] = 8
CAROUSEL_BODY_MAX_WORDS: Final[int] = 25

# =============================================================================
# CAROUSEL CANVAS
# =============================================================================

CANVAS_SIZE: Final[int] = 1080
"""Width and height of the template coordinate space."""

ZONE_MIN_WIDTH: Final[int] = 50
"""Smallest zone width accepted by the zone editor."""

ZONE_MIN_HEIGHT: Final[int] = 30
"""Smallest zone height accepted by the zone editor."""

PDF_PLACEHOLDER_SLIDES: Final[int] = 5
"""Blank slides produced for a PDF template (pages are not rasterized)."""

PDF_PLACEHOLDER_COLOR: Final[tuple[int, int, int]] = (245, 245, 245)
"""Fill color of PDF placeholder slides."""

# =============================================================================
# IMAGES
# =============================================================================

ASPECT_RATIOS: Final[tuple[str, ...]] = ("1:1", "16:9", "9:16", "4:3")
"""Aspect ratios the image tools accept."""

DEFAULT_ASPECT_RATIO: Final[str] = "1:1"

IMAGE_SIZES: Final[dict[str, tuple[int, int]]] = {
    "1:1": (1024, 1024),
    "16:9": (1792, 1024),
    "9:16": (1024, 1792),
    "4:3": (1024, 1024),
}
"""Pixel size requested from the image backend per aspect ratio."""

UPSCALE_ASPECT_RATIO: Final[str] = "16:9"

UPSCALE_PROMPT_SUFFIX: Final[str] = (
    "\n\n[HIGH RESOLUTION 4K UHD quality, extremely detailed, sharp focus, "
    "professional photography]"
)
"""Appended to the prompt when an image is regenerated as an upscale."""

IMAGE_MODEL: Final[str] = "nano-banana"
UPSCALED_IMAGE_MODEL: Final[str] = "nano-banana-4k"
