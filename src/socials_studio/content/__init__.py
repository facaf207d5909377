"""Content module: projects, generated output and its editing rules.

Architecture:
- models.py: persisted entities (Project, Output, ContentVersion, ...)
- fields.py: ContentType -> Output field table
- selection.py: sentinel rules and derived step completion
- generator.py: AI generation of sections
- service.py: OutputService (generate, select, edit, remove, revert)
- projects.py: ProjectService (create, navigate, duplicate, delete)
- export.py: Markdown export
"""

from .models import (
    VisualConcept,
    Project,
    Output,
    ContentVersion,
    Message,
    ProjectAsset,
    ProjectSource,
    GeneratedImage,
    Setting,
)
from .fields import ContentField, CONTENT_FIELDS, field_for
from .selection import (
    check_item_index,
    check_selection_index,
    is_section_selected,
    is_step_completed,
    completed_steps,
)
from .generator import ContentGenerator, platform_sections
from .service import OutputService
from .projects import ProjectService
from .export import export_markdown

__all__ = [
    # Models
    "VisualConcept",
    "Project",
    "Output",
    "ContentVersion",
    "Message",
    "ProjectAsset",
    "ProjectSource",
    "GeneratedImage",
    "Setting",
    # Fields
    "ContentField",
    "CONTENT_FIELDS",
    "field_for",
    # Selection
    "check_item_index",
    "check_selection_index",
    "is_section_selected",
    "is_step_completed",
    "completed_steps",
    # Services
    "ContentGenerator",
    "platform_sections",
    "OutputService",
    "ProjectService",
    "export_markdown",
]
