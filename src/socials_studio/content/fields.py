"""Content type to Output field table.

The single mapping consulted by editing, removal, selection and revert.
Each ContentType has one ContentField describing where its items, its
original snapshot and its selection index live on an Output. The table is
checked against the enum at import time, so adding a ContentType without
an entry here fails immediately.

Usage:
    field = field_for(ContentType.HOOK)
    field.items(output)           # ["A", "B", "C"]
    field.set_item(output, 1, "B2")
    field.selected(output)        # -1
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from ..constants import ContentType
from .models import Output, VisualConcept


@dataclass(frozen=True)
class ContentField:
    """Accessor for one content section of an Output.

    Attributes:
        content_type: Section this accessor serves.
        items_attr: Output attribute with the working items.
        original_attr: Output attribute with the original snapshot.
        index_attr: Output attribute with the selected index.
        label: Human name used in prompts and exports.
        is_scalar: True for body, which is one string rather than a list.
        is_concept: True for visual concepts, stored as {description} objects.
    """

    content_type: ContentType
    items_attr: str
    original_attr: str
    index_attr: str
    label: str
    is_scalar: bool = False
    is_concept: bool = False

    def items(self, output: Output) -> list[str]:
        """Working items as text. Body is a one-item list."""
        return self._as_text(getattr(output, self.items_attr))

    def originals(self, output: Output) -> list[str]:
        """Original snapshot as text. Body is a one-item list."""
        return self._as_text(getattr(output, self.original_attr))

    def set_items(self, output: Output, items: list[str]) -> None:
        setattr(output, self.items_attr, self._from_text(items))

    def set_originals(self, output: Output, items: list[str]) -> None:
        setattr(output, self.original_attr, self._from_text(items))

    def set_item(self, output: Output, index: int, text: str) -> None:
        """Overwrite one working item. Caller validates ``index``."""
        items = self.items(output)
        items[index] = text
        self.set_items(output, items)

    def selected(self, output: Output) -> int:
        return getattr(output, self.index_attr)

    def set_selected(self, output: Output, index: int) -> None:
        setattr(output, self.index_attr, index)

    def _as_text(self, value: str | list) -> list[str]:
        if self.is_scalar:
            return [value]
        if self.is_concept:
            return [concept.description for concept in value]
        return list(value)

    def _from_text(self, items: list[str]) -> str | list:
        if self.is_scalar:
            return items[0] if items else ""
        if self.is_concept:
            return [VisualConcept(description=text) for text in items]
        return list(items)


CONTENT_FIELDS: Mapping[ContentType, ContentField] = MappingProxyType({
    ContentType.HOOK: ContentField(
        ContentType.HOOK, "hooks", "hooks_original", "selected_hook_index", "Hooks",
    ),
    ContentType.BODY: ContentField(
        ContentType.BODY, "body_content", "body_content_original", "selected_body_index",
        "Body Content", is_scalar=True,
    ),
    ContentType.INTRO: ContentField(
        ContentType.INTRO, "intros", "intros_original", "selected_intro_index", "Intros",
    ),
    ContentType.TITLE: ContentField(
        ContentType.TITLE, "titles", "titles_original", "selected_title_index", "Titles",
    ),
    ContentType.CTA: ContentField(
        ContentType.CTA, "ctas", "ctas_original", "selected_cta_index", "Calls to Action",
    ),
    ContentType.VISUAL: ContentField(
        ContentType.VISUAL, "visual_concepts", "visual_concepts_original", "selected_visual_index",
        "Visual Concepts", is_concept=True,
    ),
})

_missing = set(ContentType) - set(CONTENT_FIELDS)
if _missing:
    raise RuntimeError(f"CONTENT_FIELDS has no entry for: {sorted(t.value for t in _missing)}")

for _field in CONTENT_FIELDS.values():
    for _attr in (_field.items_attr, _field.original_attr, _field.index_attr):
        if _attr not in Output.model_fields:
            raise RuntimeError(f"Output has no field '{_attr}' ({_field.content_type.value})")


def field_for(content_type: ContentType | str) -> ContentField:
    """Get the accessor for a content type."""
    return CONTENT_FIELDS[ContentType(content_type)]
