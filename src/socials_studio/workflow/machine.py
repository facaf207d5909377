"""Per-platform workflow state machine.

Pure functions over (platform, step). The machine holds no state; the
caller persists ``Project.current_step`` after a transition.

Usage:
    from socials_studio.workflow import steps, next_step, previous_step

    steps(Platform.YOUTUBE)
    # [SETUP, HOOKS, INTROS, TITLES, THUMBNAILS, COMPLETE]

    next_step(Platform.LINKEDIN, WorkflowStep.HOOKS)     # BODY
    next_step(Platform.LINKEDIN, WorkflowStep.COMPLETE)  # COMPLETE (clamped)

Navigation by ``next_step``/``previous_step`` moves one step at a time.
Random access (clicking a step indicator) goes through ``validate_step``,
which checks membership only, not whether earlier steps are done.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..constants import ContentType, Platform, WorkflowStep
from ..errors import UnsupportedError


_S = WorkflowStep

WORKFLOW_STEPS: Mapping[Platform, tuple[WorkflowStep, ...]] = MappingProxyType({
    Platform.LINKEDIN: (
        _S.SETUP, _S.HOOKS, _S.BODY, _S.CTAS, _S.TITLES, _S.VISUALS, _S.CAROUSEL, _S.COMPLETE,
    ),
    Platform.YOUTUBE: (
        _S.SETUP, _S.HOOKS, _S.INTROS, _S.TITLES, _S.THUMBNAILS, _S.COMPLETE,
    ),
    Platform.FACEBOOK: (
        _S.SETUP, _S.HOOKS, _S.BODY, _S.CTAS, _S.TITLES, _S.VISUALS, _S.CAROUSEL, _S.COMPLETE,
    ),
})

STEP_LABELS: Mapping[WorkflowStep, str] = MappingProxyType({
    _S.SETUP: "Project Setup",
    _S.HOOKS: "Hooks",
    _S.BODY: "Body Content",
    _S.INTROS: "Intros",
    _S.TITLES: "Titles",
    _S.CTAS: "Call to Action",
    _S.VISUALS: "Image",
    _S.THUMBNAILS: "Thumbnail",
    _S.CAROUSEL: "Carousel",
    _S.COMPLETE: "Summary",
})

# Content section edited on each step (steps without one map to None)
STEP_CONTENT_TYPES: Mapping[WorkflowStep, ContentType | None] = MappingProxyType({
    _S.SETUP: None,
    _S.HOOKS: ContentType.HOOK,
    _S.BODY: ContentType.BODY,
    _S.INTROS: ContentType.INTRO,
    _S.TITLES: ContentType.TITLE,
    _S.CTAS: ContentType.CTA,
    _S.VISUALS: ContentType.VISUAL,
    _S.THUMBNAILS: ContentType.VISUAL,
    _S.CAROUSEL: None,
    _S.COMPLETE: None,
})


def steps(platform: Platform) -> list[WorkflowStep]:
    """Get the ordered steps for a platform."""
    return list(WORKFLOW_STEPS[Platform(platform)])


def validate_step(platform: Platform, step: WorkflowStep | str) -> WorkflowStep:
    """Check that a step belongs to the platform's workflow.

    Args:
        platform: Project platform.
        step: Step to check (enum or its string value).

    Returns:
        The step as a WorkflowStep.

    Raises:
        UnsupportedError: If the step is unknown or not part of this workflow.
    """
    try:
        step = WorkflowStep(step)
    except ValueError:
        raise UnsupportedError(f"Unknown workflow step: {step}") from None

    if step not in WORKFLOW_STEPS[Platform(platform)]:
        raise UnsupportedError(f"Step '{step.value}' is not part of the {Platform(platform).value} workflow")
    return step


def next_step(platform: Platform, step: WorkflowStep) -> WorkflowStep:
    """Get the step after ``step``, or ``step`` itself at the end."""
    ordered = WORKFLOW_STEPS[Platform(platform)]
    position = ordered.index(validate_step(platform, step))
    return ordered[min(position + 1, len(ordered) - 1)]


def previous_step(platform: Platform, step: WorkflowStep) -> WorkflowStep:
    """Get the step before ``step``, or ``step`` itself at the start."""
    ordered = WORKFLOW_STEPS[Platform(platform)]
    position = ordered.index(validate_step(platform, step))
    return ordered[max(position - 1, 0)]


def is_complete(platform: Platform, step: WorkflowStep) -> bool:
    """True only for the terminal step of the workflow."""
    return validate_step(platform, step) == WORKFLOW_STEPS[Platform(platform)][-1]


def step_label(step: WorkflowStep) -> str:
    """Human label shown in the progress indicator."""
    return STEP_LABELS[WorkflowStep(step)]


def content_type_for_step(step: WorkflowStep) -> ContentType | None:
    """Content section a step works on, if any."""
    return STEP_CONTENT_TYPES[WorkflowStep(step)]
