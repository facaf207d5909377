"""Shared test fixtures and configuration.

Provides a temporary content store, a sample project and async-compatible
provider mocks. Provider mocks return realistic values (structured response
models, ImageResult with real PNG bytes) so services can run end to end.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from PIL import Image

from socials_studio.constants import Platform
from socials_studio.content import OutputService, Output, Project, ProjectService, VisualConcept
from socials_studio.content.responses import FullContentResponse, VisualConceptItem
from socials_studio.providers.image import GeneratedImageData, ImageResult
from socials_studio.providers.text import ModelReply
from socials_studio.storage import ContentStore


def make_png(width: int = 64, height: int = 64, color: tuple[int, int, int] = (200, 30, 30)) -> bytes:
    """Create PNG bytes in memory."""
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    """Small valid PNG image."""
    return make_png()


@pytest.fixture
def png_factory():
    """Factory for PNG bytes of a given size and color."""
    return make_png


@pytest.fixture
def store(tmp_path: Path) -> ContentStore:
    """Content store rooted in a temporary directory."""
    return ContentStore(tmp_path / "data")


@pytest.fixture
def project(store: ContentStore) -> Project:
    """A LinkedIn project saved in the store."""
    return ProjectService(store).create(
        "AI at work",
        "How small teams use AI assistants",
        Platform.LINKEDIN,
        target_audience="Engineering managers",
        content_style="Practical",
    )


@pytest.fixture
def output(store: ContentStore, project: Project) -> Output:
    """A generated Output with three hooks, body, two CTAs and two visuals."""
    hooks = ["Hook A", "Hook B", "Hook C"]
    ctas = ["Comment below", "Share this"]
    visuals = [VisualConcept(description="A laptop on a desk"), VisualConcept(description="A team whiteboard")]
    output = Output(
        project_id=project.id,
        hooks=list(hooks),
        hooks_original=list(hooks),
        body_content="Body text about AI.",
        body_content_original="Body text about AI.",
        ctas=list(ctas),
        ctas_original=list(ctas),
        visual_concepts=list(visuals),
        visual_concepts_original=list(visuals),
    )
    store.put(output)
    return output


@pytest.fixture
def full_content() -> FullContentResponse:
    """Structured response for a full generation call."""
    return FullContentResponse(
        hooks=["Generated hook 1", "Generated hook 2", "Generated hook 3"],
        body_content="Generated body.",
        intros=["Intro 1"],
        titles=["Title 1", "Title 2"],
        ctas=["CTA 1", "CTA 2"],
        visual_concepts=[VisualConceptItem(description="Generated visual")],
    )


@pytest.fixture
def mock_text_provider(full_content: FullContentResponse) -> AsyncMock:
    """Create a mock TextProvider.

    Returns:
        AsyncMock configured as TextProvider.
    """
    provider = AsyncMock()
    provider.generate_structured.return_value = full_content
    provider.chat_with_tools.return_value = ModelReply(text="Sure.", tool_calls=[], stop_reason="end_turn")
    provider.current_provider = "mock"
    return provider


@pytest.fixture
def mock_image_provider(png_bytes: bytes) -> AsyncMock:
    """Create a mock ImageProvider returning one 64x64 PNG.

    Returns:
        AsyncMock configured as ImageProvider.
    """
    provider = AsyncMock()
    result = ImageResult(images=[GeneratedImageData(data=png_bytes, width=64, height=64)])
    provider.generate.return_value = result
    provider.refine.return_value = result
    provider.current_provider = "mock"
    return provider


@pytest.fixture
def output_service(store: ContentStore) -> OutputService:
    """OutputService without a generator (editing operations only)."""
    return OutputService(store)
