"""Markdown export of a project's content."""

from __future__ import annotations

from ..constants import SKIPPED, ContentType
from ..workflow import step_label
from .fields import CONTENT_FIELDS
from .generator import platform_sections
from .models import Output, Project


def export_markdown(project: Project, output: Output) -> str:
    """Render a project's content as a Markdown document.

    Sections the platform does not use are left out. The selected option of
    each section is marked; unselected options follow as alternatives.

    Args:
        project: Project metadata for the header.
        output: Generated content.

    Returns:
        Markdown text.
    """
    lines = [
        f"# {project.name}",
        "",
        "## Project Info",
        "",
        f"- **Platform:** {project.platform.value}",
        f"- **Topic:** {project.topic}",
    ]
    if project.target_audience:
        lines.append(f"- **Audience:** {project.target_audience}")
    lines.append(f"- **Status:** {project.status.value}")
    lines.append(f"- **Step:** {step_label(project.current_step)}")
    lines.extend(["", "---", ""])

    for content_type in platform_sections(project.platform):
        field = CONTENT_FIELDS[content_type]
        lines.extend([f"## {field.label}", ""])

        if field.is_scalar:
            lines.extend([output.body_content or "_(empty)_", "", "---", ""])
            continue

        items = field.items(output)
        selected = field.selected(output)
        if content_type == ContentType.CTA and selected == SKIPPED:
            lines.extend(["_No call to action (skipped)._", ""])
        if not items:
            lines.extend(["_(no options generated)_", ""])

        for index, item in enumerate(items):
            marker = " (selected)" if index == selected else ""
            lines.extend([f"### Option {index + 1}{marker}", "", f"> {item}", ""])
        lines.extend(["---", ""])

    return "\n".join(lines).rstrip() + "\n"
