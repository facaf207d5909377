"""Selection rules and derived step completion.

Completion is never stored. It is recomputed from the Output (and the
carousel, for the carousel step) every time it is needed.

Sentinels:
    NO_SELECTION (-1)  nothing chosen yet
    SKIPPED (-2)       user chose "no CTA"; only valid for CTA
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..constants import NO_SELECTION, SKIPPED, ContentType, Platform, WorkflowStep
from ..errors import OutOfRangeError
from ..workflow import content_type_for_step, steps
from .fields import ContentField, field_for
from .models import Output

if TYPE_CHECKING:
    from ..carousel.models import CarouselOutput


def check_item_index(field: ContentField, output: Output, index: int) -> None:
    """Require ``0 <= index < len(items)``.

    Raises:
        OutOfRangeError: If the index does not point at an item.
    """
    length = len(field.items(output))
    if not 0 <= index < length:
        raise OutOfRangeError(field.content_type.value, index, length)


def check_selection_index(field: ContentField, output: Output, index: int) -> None:
    """Require ``NO_SELECTION <= index < len(items)``.

    Raises:
        OutOfRangeError: For any other value, including SKIPPED.
    """
    if index == NO_SELECTION:
        return
    check_item_index(field, output, index)


def is_section_selected(content_type: ContentType, output: Output) -> bool:
    """Whether a content section counts as done."""
    field = field_for(content_type)
    if field.is_scalar:
        return bool(output.body_content.strip())

    index = field.selected(output)
    if content_type == ContentType.CTA and index == SKIPPED:
        return True
    return 0 <= index < len(field.items(output))


def is_step_completed(
    step: WorkflowStep,
    output: Output | None,
    carousel: CarouselOutput | None = None,
) -> bool:
    """Whether a single non-terminal step is done."""
    if output is None:
        return False
    if step == WorkflowStep.SETUP:
        return True
    if step == WorkflowStep.CAROUSEL:
        return carousel is not None and len(carousel.slides) > 0

    content_type = content_type_for_step(step)
    if content_type is None:
        return False
    return is_section_selected(content_type, output)


def completed_steps(
    platform: Platform,
    output: Output | None,
    carousel: CarouselOutput | None = None,
) -> list[WorkflowStep]:
    """Derive the completed steps of a platform workflow.

    The terminal step counts as completed once every other step is.

    Args:
        platform: Project platform.
        output: Project output, or None if nothing was generated yet.
        carousel: Project carousel, if any.

    Returns:
        Completed steps in workflow order.
    """
    ordered = steps(platform)
    *body_steps, terminal = ordered
    done = [step for step in body_steps if is_step_completed(step, output, carousel)]
    if len(done) == len(body_steps):
        done.append(terminal)
    return done
