"""Project context sent to the assistant model with every request.

The context is plain text assembled from the project, its current Output,
research sources, reference images, generated thumbnails and (on the
carousel step) the carousel slides. Sections with nothing to show are
left out.
"""

from __future__ import annotations

from ..carousel.models import CarouselOutput
from ..constants import (
    CONTEXT_SOURCES_MAX_CHARS,
    SKIPPED,
    THUMBNAIL_MATCH_PREFIX_CHARS,
    TRUNCATION_MARKER,
    ContentType,
    WorkflowStep,
)
from ..content.fields import field_for
from ..content.models import GeneratedImage, Output, Project, ProjectAsset, ProjectSource
from ..storage import ContentStore


def _excerpt(text: str, limit: int) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def format_current_content(output: Output | None) -> str:
    """Current content with (selected) markers, or a placeholder."""
    if output is None:
        return "No content generated yet."

    blocks: list[str] = []
    sections = [
        (ContentType.HOOK, "Hooks", None),
        (ContentType.BODY, "Body content", 200),
        (ContentType.INTRO, "Intros", 100),
        (ContentType.TITLE, "Titles", None),
        (ContentType.CTA, "CTAs", None),
        (ContentType.VISUAL, "Visual concepts", None),
    ]

    for content_type, label, limit in sections:
        if content_type == ContentType.BODY:
            if output.body_content:
                blocks.append(f"{label}:\n  {_excerpt(output.body_content, limit)}")
            continue

        field = field_for(content_type)
        items = field.items(output)
        if not items:
            continue
        selected = field.selected(output)
        lines = [f"{label}:"]
        for i, item in enumerate(items):
            text = _excerpt(item, limit) if limit else item
            marker = " (selected)" if i == selected else ""
            lines.append(f"  {i + 1}. {text}{marker}")
        if selected == SKIPPED:
            lines.append("  (skipped)")
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks) if blocks else "No content yet."


class ContextBuilder:
    """Assembles the assistant context for a project.

    Usage:
        builder = ContextBuilder(store)
        context = builder.build(project)
    """

    def __init__(self, store: ContentStore, char_limit: int = CONTEXT_SOURCES_MAX_CHARS):
        self.store = store
        self.char_limit = char_limit

    def build(self, project: Project) -> str:
        output = self.store.find_one(Output, project_id=project.id)
        parts = [
            self._project_section(project, output),
            self._sources_section(project.id),
            self._assets_section(project.id),
            self._images_section(project.id, output),
        ]
        if project.current_step == WorkflowStep.CAROUSEL:
            parts.append(self._carousel_section(project.id))
        return "\n\n".join(part for part in parts if part)

    def _project_section(self, project: Project, output: Output | None) -> str:
        return (
            "Project context:\n"
            f"- Platform: {project.platform.value}\n"
            f"- Topic: {project.topic}\n"
            f"- Target audience: {project.target_audience or 'Not specified'}\n"
            f"- Content style: {project.content_style or 'Not specified'}\n"
            f"- Current step: {project.current_step.value}\n\n"
            f"Current content:\n{format_current_content(output)}"
        )

    def _sources_section(self, project_id: str) -> str:
        """Enabled sources, oldest first, cut to the character budget."""
        sources = sorted(
            (source for source in self.store.find(ProjectSource, project_id=project_id) if source.enabled),
            key=lambda source: source.created_at,
        )
        if not sources:
            return ""

        lines = [
            "--- Reference Materials ---",
            "The user has uploaded these information sources:",
            "",
        ]
        used = 0
        for source in sources:
            available = self.char_limit - used
            if available <= 0:
                break
            content = source.content
            if len(content) > available:
                content = content[:available] + TRUNCATION_MARKER
            lines.append(f"### {source.title}\n{content}\n")
            used += len(content)
        return "\n".join(lines).rstrip()

    def _assets_section(self, project_id: str) -> str:
        assets = sorted(
            self.store.find(ProjectAsset, project_id=project_id),
            key=lambda asset: asset.created_at,
        )
        if not assets:
            return ""

        lines = [
            "--- Reference Images ---",
            "The user has uploaded these reference images (use the asset_id for set_slide_image):",
        ]
        for i, asset in enumerate(assets):
            lines.append(f"  {i + 1}. {asset.filename} ({asset.mime_type}) - asset_id: {asset.id}")
        lines.append("")
        lines.append(
            "For image generation, set use_references=true. "
            "For carousel slides, use set_slide_image with the asset_id."
        )
        return "\n".join(lines)

    def _images_section(self, project_id: str, output: Output | None) -> str:
        """Thumbnails matched to visual concepts, else a plain image list."""
        images = sorted(
            self.store.find(GeneratedImage, project_id=project_id),
            key=lambda image: image.created_at,
            reverse=True,
        )
        if not images:
            return ""

        concepts = output.visual_concepts if output else []
        if concepts:
            lines = [
                "--- Thumbnails ---",
                "These are the current thumbnails (use the id when calling refine_image):",
            ]
            for i, concept in enumerate(concepts):
                match = match_thumbnail(concept.description, images)
                if match is not None:
                    lines.append(
                        f'  Thumbnail {i + 1}: "{_excerpt(match.prompt, 80)}" '
                        f"(id: {match.id}, {match.width}x{match.height})"
                    )
                else:
                    lines.append(
                        f'  Thumbnail {i + 1}: [not yet generated] concept: "{concept.description[:60]}"'
                    )
            return "\n".join(lines)

        lines = ["--- Generated Images ---"]
        for i, image in enumerate(images):
            lines.append(
                f'  Image {i + 1}: "{_excerpt(image.prompt, 80)}" '
                f"(id: {image.id}, {image.width}x{image.height})"
            )
        lines.append("")
        lines.append("Use the image id when calling refine_image.")
        return "\n".join(lines)

    def _carousel_section(self, project_id: str) -> str:
        carousel = self.store.find_one(CarouselOutput, project_id=project_id)
        if carousel is None:
            return ""

        lines = [
            "--- Carousel Slides ---",
            "Current carousel slides (use 0-based slide_index for tools):",
        ]
        for i, slide in enumerate(carousel.slides):
            image_status = f"image: {slide.image_id}" if slide.image_id else "no image"
            lines.append(f'  Slide {i + 1}: "{slide.headline}" ({image_status})')
            if slide.body:
                lines.append(f"    Body: {_excerpt(slide.body, 50)}")
            if slide.cta:
                lines.append(f"    CTA: {slide.cta}")
        lines.append("")
        lines.append("Use edit_carousel_slide to modify text, set_slide_image to add a reference image.")
        return "\n".join(lines)


def match_thumbnail(description: str, images: list[GeneratedImage]) -> GeneratedImage | None:
    """Most recent image generated for a visual concept.

    ``images`` must be newest first. An image matches when its prompt is the
    concept description or contains the description's first characters.
    """
    prefix = description[:THUMBNAIL_MATCH_PREFIX_CHARS]
    for image in images:
        if image.prompt == description or (prefix and prefix in image.prompt):
            return image
    return None
