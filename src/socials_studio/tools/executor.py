"""Action executor for assistant-requested changes.

Actions are partitioned by category and each category is applied on its
own: content actions against the Output, carousel actions against the
CarouselOutput, image actions against the image backend. Regenerate and
add-more actions need another model call and are handed back as
follow-ups instead of being run here.

Each action is isolated. A NotFound, OutOfRange or Unsupported failure
becomes a failed ActionResult and the batch continues. A StoreError is
not caught: persistence failures end the request.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from ..constants import EditedBy
from ..errors import StoreError
from .actions import (
    Action,
    ActionCategory,
    EditCardAction,
    EditCarouselSlideAction,
    GenerateImageAction,
    GenerateThumbnailAction,
    RefineImageAction,
    RemoveCardAction,
    RemoveSlideImageAction,
    SelectCardAction,
    SetSlideImageAction,
)
from .definitions import ActionResult

if TYPE_CHECKING:
    from ..carousel import CarouselService
    from ..content import OutputService
    from ..content.models import GeneratedImage
    from ..images import ImageService

# Logger for action execution
_logger = logging.getLogger("actions")


# Type for action callback (for CLI display)
ActionCallback = Callable[[dict[str, Any]], Awaitable[None]] | None


@dataclass
class ExecutionReport:
    """Outcome of executing one batch of actions."""

    results: list[ActionResult] = field(default_factory=list)
    images: list[GeneratedImage] = field(default_factory=list)
    image_errors: list[str] = field(default_factory=list)
    follow_ups: list[Action] = field(default_factory=list)
    content_changed: bool = False
    carousel_changed: bool = False

    @property
    def applied(self) -> int:
        """Number of actions that succeeded."""
        return sum(1 for result in self.results if result.success)


def partition(actions: list[Action]) -> dict[ActionCategory, list[Action]]:
    """Group actions by category, keeping their relative order."""
    groups: dict[ActionCategory, list[Action]] = {category: [] for category in ActionCategory}
    for action in actions:
        groups[action.category].append(action)
    return groups


class ActionExecutor:
    """Applies typed actions to one project.

    Usage:
        executor = ActionExecutor(project_id, outputs, carousels, images)
        report = await executor.execute(parse_tool_calls(reply.tool_calls))
    """

    def __init__(
        self,
        project_id: str,
        outputs: OutputService,
        carousels: CarouselService,
        images: ImageService | None = None,
        callback: ActionCallback = None,
    ):
        """Initialize the action executor.

        Args:
            project_id: Project every action applies to.
            outputs: Service for content actions.
            carousels: Service for carousel actions.
            images: Service for image actions. Without it image actions fail.
            callback: Optional callback for action events.
        """
        self.project_id = project_id
        self.outputs = outputs
        self.carousels = carousels
        self.images = images
        self.callback = callback
        self._total_actions = 0

    async def _emit_event(self, event: dict[str, Any]) -> None:
        """Emit an action event if callback is set."""
        if self.callback:
            await self.callback(event)

    async def execute(self, actions: list[Action]) -> ExecutionReport:
        """Apply a batch of actions.

        Returns:
            ExecutionReport with one result per non-deferred action.

        Raises:
            StoreError: If the store fails while applying an action.
        """
        report = ExecutionReport()
        groups = partition(actions)

        for action in groups[ActionCategory.CONTENT]:
            result = await self._run(action)
            report.results.append(result)
            report.content_changed |= result.success

        for action in groups[ActionCategory.CAROUSEL]:
            result = await self._run(action)
            report.results.append(result)
            report.carousel_changed |= result.success

        for action in groups[ActionCategory.IMAGE]:
            result = await self._run(action)
            report.results.append(result)
            if result.success:
                report.images.append(result.result)
            else:
                report.image_errors.append(result.error or "Image generation failed")

        report.follow_ups = list(groups[ActionCategory.DEFERRED])
        return report

    async def _run(self, action: Action) -> ActionResult:
        """Apply one action, converting domain errors into a failed result."""
        self._total_actions += 1
        start_time = time.time()

        await self._emit_event({
            "type": "action_start",
            "action": action.type,
            "category": action.category.value,
            "call_number": self._total_actions,
        })

        args_str = json.dumps(action.model_dump(mode="json", exclude={"type"}), ensure_ascii=False)
        _logger.info(
            f"PROJECT:{self.project_id} | ACTION_START | action:{action.type} | "
            f"call_num:{self._total_actions} | args:{args_str[:200]}"
        )

        try:
            value = await self._apply(action)
            result = ActionResult(action=action.type, success=True, result=value)
        except StoreError:
            raise
        except Exception as e:
            result = ActionResult(action=action.type, success=False, error=str(e))
            _logger.error(f"PROJECT:{self.project_id} | ACTION_ERROR | action:{action.type} | error:{e}")

        result.duration_ms = int((time.time() - start_time) * 1000)

        await self._emit_event({
            "type": "action_complete",
            "action": action.type,
            "success": result.success,
            "duration_ms": result.duration_ms,
            "error": result.error,
        })
        _logger.info(
            f"PROJECT:{self.project_id} | ACTION_END | action:{action.type} | "
            f"success:{result.success} | duration_ms:{result.duration_ms}"
        )
        return result

    async def _apply(self, action: Action) -> Any:
        pid = self.project_id

        # Content
        if isinstance(action, EditCardAction):
            return self.outputs.edit_item(
                pid, action.content_type, action.index, action.new_content, edited_by=EditedBy.ASSISTANT
            )
        if isinstance(action, RemoveCardAction):
            return self.outputs.remove_item(pid, action.content_type, action.index)
        if isinstance(action, SelectCardAction):
            return self.outputs.update_selection(pid, action.content_type, action.index)

        # Carousel
        if isinstance(action, EditCarouselSlideAction):
            return self.carousels.edit_slide(pid, action.slide_index, action.field, action.value)
        if isinstance(action, SetSlideImageAction):
            return self.carousels.set_slide_image(pid, action.slide_index, action.asset_id)
        if isinstance(action, RemoveSlideImageAction):
            return self.carousels.remove_slide_image(pid, action.slide_index)

        # Images
        if self.images is None:
            raise RuntimeError("Image generation is not configured")
        if isinstance(action, GenerateImageAction):
            return await self.images.generate_image(
                pid, action.prompt, use_references=action.use_references, aspect_ratio=action.aspect_ratio
            )
        if isinstance(action, RefineImageAction):
            return await self.images.refine_image(
                pid, action.image_id, action.refinement_prompt, use_references=action.use_references
            )
        if isinstance(action, GenerateThumbnailAction):
            return await self.images.generate_thumbnail(
                pid,
                action.prompt,
                action.thumbnail_index,
                use_references=action.use_references,
                aspect_ratio=action.aspect_ratio,
            )

        raise ValueError(f"Action {action.type} is not executed in-process")

    @property
    def total_actions(self) -> int:
        """Get total number of actions executed."""
        return self._total_actions
