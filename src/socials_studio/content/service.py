"""Output operations: generation, selection, editing, removal and revert.

Every mutation loads the Output, changes it and writes it back
(last writer wins). Item edits and reverts append a ContentVersion.

Two generation paths behave differently on purpose:
- ``generate`` on an existing Output overwrites the working items of every
  section but keeps ``_original`` and the selections.
- ``regenerate_section`` resets one section: items and ``_original`` are
  both replaced and its selection goes back to NO_SELECTION.

Removing an item does not adjust the section's selected index. A selection
pointing at or after the removed item is left as is.
"""

from __future__ import annotations

import logging

from ..carousel.models import CarouselOutput
from ..constants import NO_SELECTION, SKIPPED, ContentType, EditedBy, WorkflowStep
from ..errors import NotFoundError, UnsupportedError
from ..storage import ContentStore
from ..utils import now_utc
from .fields import CONTENT_FIELDS, field_for
from .generator import ContentGenerator
from .models import ContentVersion, Output, Project
from .selection import check_item_index, check_selection_index, completed_steps

_logger = logging.getLogger("content")


class OutputService:
    """Operations on a project's Output.

    Usage:
        service = OutputService(store, generator)
        output = await service.generate(project_id)
        output = service.update_selection(project_id, ContentType.HOOK, 1)
        output = service.edit_item(project_id, ContentType.HOOK, 1, "Sharper hook")
        output = service.revert(project_id, ContentType.HOOK, 1)
    """

    def __init__(self, store: ContentStore, generator: ContentGenerator | None = None):
        self.store = store
        self.generator = generator

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def get(self, project_id: str) -> Output | None:
        return self.store.find_one(Output, project_id=project_id)

    def require(self, project_id: str) -> Output:
        """Get a project's Output.

        Raises:
            NotFoundError: If nothing was generated for the project yet.
        """
        output = self.get(project_id)
        if output is None:
            raise NotFoundError("Output", project_id)
        return output

    def _save(self, output: Output) -> Output:
        output.updated_at = now_utc()
        self.store.put(output)
        return output

    def _require_generator(self) -> ContentGenerator:
        if self.generator is None:
            raise UnsupportedError("No content generator configured")
        return self.generator

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    async def generate(self, project_id: str) -> Output:
        """Generate every section of a project.

        Creates the Output on first call, with ``_original`` copied from the
        generated items. Later calls overwrite the working items only.
        """
        project = self.store.require(Project, project_id)
        content = await self._require_generator().generate_all(project)
        generated = {
            ContentType.HOOK: content.hooks,
            ContentType.BODY: [content.body_content],
            ContentType.INTRO: content.intros,
            ContentType.TITLE: content.titles,
            ContentType.CTA: content.ctas,
            ContentType.VISUAL: [concept.description for concept in content.visual_concepts],
        }

        output = self.get(project_id)
        created = output is None
        if output is None:
            output = Output(project_id=project_id)

        for content_type, items in generated.items():
            field = CONTENT_FIELDS[content_type]
            field.set_items(output, items)
            if created:
                field.set_originals(output, items)

        _logger.info(f"OUTPUT_GENERATED | project:{project_id} | created:{created}")
        return self._save(output)

    async def regenerate_section(self, project_id: str, content_type: ContentType) -> Output:
        """Replace one section with fresh items and reset its selection."""
        project = self.store.require(Project, project_id)
        output = self.require(project_id)
        field = field_for(content_type)

        items = await self._require_generator().generate_section(
            project, field.content_type, existing=field.items(output),
        )
        field.set_items(output, items)
        field.set_originals(output, items)
        field.set_selected(output, NO_SELECTION)

        _logger.info(
            f"SECTION_REGENERATED | project:{project_id} | type:{field.content_type.value} | items:{len(items)}"
        )
        return self._save(output)

    async def add_more(self, project_id: str, content_type: ContentType) -> Output:
        """Append newly generated items to a list section.

        Raises:
            UnsupportedError: For body, which is a single string.
        """
        field = field_for(content_type)
        if field.is_scalar:
            raise UnsupportedError(f"Cannot add more items to {field.content_type.value}")

        project = self.store.require(Project, project_id)
        output = self.require(project_id)
        existing = field.items(output)

        new_items = await self._require_generator().generate_section(
            project, field.content_type, existing=existing,
        )
        field.set_items(output, existing + new_items)
        field.set_originals(output, field.originals(output) + new_items)

        _logger.info(
            f"SECTION_EXTENDED | project:{project_id} | type:{field.content_type.value} | added:{len(new_items)}"
        )
        return self._save(output)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def update_selection(self, project_id: str, content_type: ContentType, index: int) -> Output:
        """Select an item, or clear the selection with NO_SELECTION.

        Raises:
            OutOfRangeError: If ``index`` is neither -1 nor a valid item index.
        """
        output = self.require(project_id)
        field = field_for(content_type)
        check_selection_index(field, output, index)
        field.set_selected(output, index)
        return self._save(output)

    def skip(self, project_id: str, content_type: ContentType) -> Output:
        """Mark a section as explicitly skipped (CTA only).

        Raises:
            UnsupportedError: For any section other than CTA.
        """
        if ContentType(content_type) != ContentType.CTA:
            raise UnsupportedError(f"Only cta can be skipped, not {ContentType(content_type).value}")
        output = self.require(project_id)
        field_for(ContentType.CTA).set_selected(output, SKIPPED)
        return self._save(output)

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def edit_item(
        self,
        project_id: str,
        content_type: ContentType,
        index: int,
        new_content: str,
        edited_by: EditedBy = EditedBy.USER,
    ) -> Output:
        """Overwrite one item and record the previous value.

        Raises:
            OutOfRangeError: If ``index`` does not point at an item.
        """
        output = self.require(project_id)
        field = field_for(content_type)
        check_item_index(field, output, index)

        old_content = field.items(output)[index]
        field.set_item(output, index, new_content)
        self._save(output)

        self.store.put(ContentVersion(
            project_id=project_id,
            content_type=field.content_type.value,
            content_index=index,
            old_content=old_content,
            new_content=new_content,
            edited_by=edited_by,
        ))
        _logger.info(
            f"ITEM_EDITED | project:{project_id} | type:{field.content_type.value} | "
            f"index:{index} | by:{EditedBy(edited_by).value}"
        )
        return output

    def remove_item(self, project_id: str, content_type: ContentType, index: int) -> Output:
        """Remove one item and its original. The selected index is left unchanged.

        Raises:
            UnsupportedError: For body.
            OutOfRangeError: If ``index`` does not point at an item.
        """
        field = field_for(content_type)
        if field.is_scalar:
            raise UnsupportedError(f"{field.content_type.value} cannot be removed")

        output = self.require(project_id)
        check_item_index(field, output, index)

        items = field.items(output)
        items.pop(index)
        field.set_items(output, items)

        # Originals stay aligned with items so revert targets the same item
        originals = field.originals(output)
        if index < len(originals):
            originals.pop(index)
            field.set_originals(output, originals)

        _logger.info(
            f"ITEM_REMOVED | project:{project_id} | type:{field.content_type.value} | "
            f"index:{index} | selected:{field.selected(output)}"
        )
        return self._save(output)

    def revert(
        self,
        project_id: str,
        content_type: ContentType,
        index: int,
        edited_by: EditedBy = EditedBy.USER,
    ) -> Output:
        """Restore an item to its original generated value.

        Does nothing when no original exists at ``index`` or the item already
        holds it.

        Raises:
            OutOfRangeError: If ``index`` does not point at an item.
        """
        output = self.require(project_id)
        field = field_for(content_type)
        check_item_index(field, output, index)

        originals = field.originals(output)
        if index >= len(originals):
            _logger.info(
                f"REVERT_SKIPPED | project:{project_id} | type:{field.content_type.value} | "
                f"index:{index} | reason:no_original"
            )
            return output

        if field.items(output)[index] == originals[index]:
            return output
        return self.edit_item(project_id, content_type, index, originals[index], edited_by)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def history(self, project_id: str, content_type: ContentType, index: int) -> list[ContentVersion]:
        """Edits of one item, newest first."""
        versions = self.store.find(
            ContentVersion,
            project_id=project_id,
            content_type=ContentType(content_type).value,
            content_index=index,
        )
        return sorted(versions, key=lambda version: version.created_at, reverse=True)

    def restore_version(
        self,
        project_id: str,
        version_id: str,
        edited_by: EditedBy = EditedBy.USER,
    ) -> Output:
        """Write a version's previous value back to its item.

        Raises:
            NotFoundError: If the version does not exist for this project.
            OutOfRangeError: If the item no longer exists.
        """
        version = self.store.get(ContentVersion, version_id)
        if version is None or version.project_id != project_id:
            raise NotFoundError("ContentVersion", version_id)
        return self.edit_item(
            project_id,
            ContentType(version.content_type),
            version.content_index,
            version.old_content,
            edited_by,
        )

    def completed_steps(self, project_id: str) -> list[WorkflowStep]:
        """Steps whose content is done, derived from the current Output."""
        project = self.store.require(Project, project_id)
        carousel = self.store.find_one(CarouselOutput, project_id=project_id)
        return completed_steps(project.platform, self.get(project_id), carousel)
