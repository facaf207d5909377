"""Workflow state machine for project steps."""

from .machine import (
    WORKFLOW_STEPS,
    STEP_LABELS,
    STEP_CONTENT_TYPES,
    steps,
    validate_step,
    next_step,
    previous_step,
    is_complete,
    step_label,
    content_type_for_step,
)

__all__ = [
    "WORKFLOW_STEPS",
    "STEP_LABELS",
    "STEP_CONTENT_TYPES",
    "steps",
    "validate_step",
    "next_step",
    "previous_step",
    "is_complete",
    "step_label",
    "content_type_for_step",
]
