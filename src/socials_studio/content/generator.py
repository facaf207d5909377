"""AI content generation for project sections.

Usage:
    generator = ContentGenerator(text_provider, composer)
    full = await generator.generate_all(project)
    hooks = await generator.generate_section(project, ContentType.HOOK, existing=["..."])
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..constants import DEFAULT_ITEMS_PER_SECTION, ContentType, Platform, WorkflowStep
from ..workflow import content_type_for_step, steps
from .models import Project
from .responses import BodyResponse, FullContentResponse, SectionItemsResponse, VisualConceptsResponse

if TYPE_CHECKING:
    from ..prompts import PromptComposer
    from ..providers.text import TextProvider

_logger = logging.getLogger("ai_calls")


CONTENT_GENERATION_PROMPT = """You are an expert social media content creator. Generate structured post content for the project described below.

Guidelines:
- Hooks stop the scroll and relate to the specific topic
- Body content is 150-300 words with short paragraphs for mobile readability
- Calls to action encourage meaningful engagement
- Visual concepts describe images or graphics that complement the post
- Tailor ALL content to the topic, audience and style given"""

SECTION_INSTRUCTIONS: dict[ContentType, str] = {
    ContentType.HOOK: "Generate {count} new attention-grabbing hooks.",
    ContentType.BODY: "Generate new body content (150-300 words, short paragraphs optimized for mobile).",
    ContentType.INTRO: "Generate {count} new video intro scripts that hook viewers in the first 10 seconds.",
    ContentType.TITLE: "Generate {count} new titles that create curiosity without clickbait.",
    ContentType.CTA: "Generate {count} new calls to action that drive meaningful engagement.",
    ContentType.VISUAL: "Generate {count} new visual concept descriptions that complement the content.",
}

CONTENT_TYPE_STEPS: dict[ContentType, WorkflowStep] = {
    ContentType.HOOK: WorkflowStep.HOOKS,
    ContentType.BODY: WorkflowStep.BODY,
    ContentType.INTRO: WorkflowStep.INTROS,
    ContentType.TITLE: WorkflowStep.TITLES,
    ContentType.CTA: WorkflowStep.CTAS,
    ContentType.VISUAL: WorkflowStep.VISUALS,
}


def platform_sections(platform: Platform) -> list[ContentType]:
    """Content sections a platform's workflow produces, in step order."""
    sections: list[ContentType] = []
    for step in steps(platform):
        content_type = content_type_for_step(step)
        if content_type is not None and content_type not in sections:
            sections.append(content_type)
    return sections


def describe_project(project: Project) -> str:
    """Project summary included in every generation prompt."""
    lines = [
        f"Platform: {project.platform.value}",
        f"Topic: {project.topic}",
    ]
    if project.target_audience:
        lines.append(f"Target audience: {project.target_audience}")
    if project.content_style:
        lines.append(f"Style: {project.content_style}")
    return "\n".join(lines)


class ContentGenerator:
    """Produces section content through the text provider."""

    def __init__(
        self,
        text_provider: TextProvider,
        composer: PromptComposer | None = None,
        items_per_section: int = DEFAULT_ITEMS_PER_SECTION,
    ):
        self.text_provider = text_provider
        self.composer = composer
        self.items_per_section = items_per_section

    def _system_prompt(self, project: Project, step: WorkflowStep | None) -> str:
        if self.composer is None:
            return CONTENT_GENERATION_PROMPT
        return self.composer.compose(CONTENT_GENERATION_PROMPT, project.platform, step)

    async def generate_all(self, project: Project) -> FullContentResponse:
        """Generate every section the project's platform uses.

        Sections outside the platform's workflow are cleared.
        """
        sections = platform_sections(project.platform)
        wanted = ", ".join(section.value for section in sections)
        prompt = (
            f"{describe_project(project)}\n\n"
            f"Produce these sections: {wanted}. "
            f"Give {self.items_per_section} options for every list section."
        )

        result = await self.text_provider.generate_structured(
            prompt=prompt,
            response_model=FullContentResponse,
            system=self._system_prompt(project, None),
            task="content_generation",
        )

        updates = {
            "hooks": result.hooks if ContentType.HOOK in sections else [],
            "body_content": result.body_content if ContentType.BODY in sections else "",
            "intros": result.intros if ContentType.INTRO in sections else [],
            "titles": result.titles if ContentType.TITLE in sections else [],
            "ctas": result.ctas if ContentType.CTA in sections else [],
            "visual_concepts": result.visual_concepts if ContentType.VISUAL in sections else [],
        }
        return result.model_copy(update=updates)

    async def generate_section(
        self,
        project: Project,
        content_type: ContentType,
        existing: list[str] | None = None,
        count: int | None = None,
    ) -> list[str]:
        """Generate new items for one section.

        Args:
            project: Project being worked on.
            content_type: Section to generate.
            existing: Current items the new ones must differ from.
            count: Number of items (ignored for body).

        Returns:
            New items as text. Body returns a single-item list.
        """
        count = count or self.items_per_section
        instruction = SECTION_INSTRUCTIONS[content_type].format(count=count)
        prompt = f"{describe_project(project)}\n\n{instruction}"
        if existing:
            listed = "\n".join(f"- {item}" for item in existing if item)
            prompt += f"\n\nMake them fresh and different from these existing options:\n{listed}"

        system = self._system_prompt(project, CONTENT_TYPE_STEPS[content_type])
        task = f"regenerate_{content_type.value}"

        if content_type == ContentType.BODY:
            body = await self.text_provider.generate_structured(
                prompt=prompt, response_model=BodyResponse, system=system, task=task,
            )
            return [body.body]

        if content_type == ContentType.VISUAL:
            concepts = await self.text_provider.generate_structured(
                prompt=prompt, response_model=VisualConceptsResponse, system=system, task=task,
            )
            return [concept.description for concept in concepts.concepts][:count]

        section = await self.text_provider.generate_structured(
            prompt=prompt, response_model=SectionItemsResponse, system=system, task=task,
        )
        _logger.debug(f"SECTION_GENERATED | type:{content_type.value} | items:{len(section.items)}")
        return section.items[:count]
