"""Text zone authoring for template slides.

Zones are drawn as rectangles in the fixed 1080x1080 template space. A
drag that is too small (under 50 wide or 30 tall) creates nothing, which
filters out accidental clicks.

Usage:
    editor = TextZoneEditor(slide.text_zones)
    editor.begin(100, 120, TextZoneType.HEADLINE)
    zone = editor.finish(900, 300)     # TextZone or None
    editor.update_zone(zone.id, fontSize=72)
    slide.text_zones = editor.zones
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..constants import CANVAS_SIZE, ZONE_MIN_HEIGHT, ZONE_MIN_WIDTH, TextZoneType
from ..errors import NotFoundError, UnsupportedError
from .models import TextZone

ZONE_DEFAULTS: dict[TextZoneType, dict[str, Any]] = {
    TextZoneType.HEADLINE: {"fontSize": 64, "fontWeight": "bold"},
    TextZoneType.BODY: {"fontSize": 32, "fontWeight": "normal"},
    TextZoneType.CTA: {"fontSize": 28, "fontWeight": "normal"},
}
DEFAULT_ZONE_COLOR = "#1a1a1a"


@dataclass
class _Draft:
    x: float
    y: float
    zone_type: TextZoneType


class TextZoneEditor:
    """Create, edit and delete the text zones of one template slide."""

    def __init__(
        self,
        zones: list[TextZone] | None = None,
        canvas_size: int = CANVAS_SIZE,
        min_width: int = ZONE_MIN_WIDTH,
        min_height: int = ZONE_MIN_HEIGHT,
    ):
        self._zones = [zone.model_copy() for zone in zones or []]
        self.canvas_size = canvas_size
        self.min_width = min_width
        self.min_height = min_height
        self._draft: _Draft | None = None

    @property
    def zones(self) -> list[TextZone]:
        return [zone.model_copy() for zone in self._zones]

    @property
    def is_drawing(self) -> bool:
        return self._draft is not None

    def _clamp(self, value: float) -> float:
        return max(0.0, min(float(value), float(self.canvas_size)))

    def to_canvas(self, x: float, y: float, display_width: float, display_height: float) -> tuple[float, float]:
        """Map a point on a scaled preview to template coordinates."""
        return (
            round(x * self.canvas_size / display_width),
            round(y * self.canvas_size / display_height),
        )

    def normalize_rect(self, x1: float, y1: float, x2: float, y2: float) -> tuple[float, float, float, float]:
        """Rectangle (x, y, width, height) for a drag in any direction, clamped to the canvas."""
        x1, y1, x2, y2 = (self._clamp(v) for v in (x1, y1, x2, y2))
        return min(x1, x2), min(y1, y2), abs(x2 - x1), abs(y2 - y1)

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def begin(self, x: float, y: float, zone_type: TextZoneType = TextZoneType.HEADLINE) -> None:
        """Start drawing a zone at a point."""
        self._draft = _Draft(self._clamp(x), self._clamp(y), TextZoneType(zone_type))

    def preview(self, x: float, y: float) -> tuple[float, float, float, float] | None:
        """Rectangle being drawn while the pointer is at (x, y)."""
        if self._draft is None:
            return None
        return self.normalize_rect(self._draft.x, self._draft.y, x, y)

    def cancel(self) -> None:
        self._draft = None

    def finish(self, x: float, y: float) -> TextZone | None:
        """Finish drawing at a point.

        Returns:
            The new zone, or None if the rectangle was too small or no
            drawing was in progress.
        """
        if self._draft is None:
            return None
        draft, self._draft = self._draft, None
        zx, zy, width, height = self.normalize_rect(draft.x, draft.y, x, y)
        return self.add_zone(zx, zy, width, height, draft.zone_type)

    def add_zone(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        zone_type: TextZoneType,
        **style: Any,
    ) -> TextZone | None:
        """Add a zone directly. Returns None if it is below the minimum size."""
        if width < self.min_width or height < self.min_height:
            return None

        zone_type = TextZoneType(zone_type)
        attrs = {
            **ZONE_DEFAULTS[zone_type],
            "color": DEFAULT_ZONE_COLOR,
            "textAlign": "center",
            **style,
        }
        zone = TextZone(type=zone_type, x=x, y=y, width=width, height=height, **attrs)
        self._zones.append(zone)
        return zone.model_copy()

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def _index(self, zone_id: str) -> int:
        for index, zone in enumerate(self._zones):
            if zone.id == zone_id:
                return index
        raise NotFoundError("TextZone", zone_id)

    def update_zone(self, zone_id: str, **changes: Any) -> TextZone:
        """Change zone attributes (geometry or style).

        Raises:
            NotFoundError: If no zone has this id.
            UnsupportedError: If the change would shrink the zone below the minimum.
        """
        index = self._index(zone_id)
        data = self._zones[index].model_dump()
        data.update(changes)
        data["id"] = zone_id
        if data["width"] < self.min_width or data["height"] < self.min_height:
            raise UnsupportedError(
                f"Zone must be at least {self.min_width}x{self.min_height}"
            )
        zone = TextZone.model_validate(data)
        self._zones[index] = zone
        return zone.model_copy()

    def remove_zone(self, zone_id: str) -> None:
        """Delete a zone.

        Raises:
            NotFoundError: If no zone has this id.
        """
        del self._zones[self._index(zone_id)]

    def zone_at(self, x: float, y: float) -> TextZone | None:
        """Topmost zone containing a point."""
        for zone in reversed(self._zones):
            if zone.x <= x <= zone.x + zone.width and zone.y <= y <= zone.y + zone.height:
                return zone.model_copy()
        return None
