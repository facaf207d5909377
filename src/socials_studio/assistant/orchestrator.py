"""Assistant request handling.

One request: build the project context, assemble and normalize the
conversation, call the model with the tool schemas, turn its tool calls
into actions, apply them, and store both sides of the exchange.

Regenerate and add-more requests are not run inside the request. They are
returned as follow-ups for the caller to run with ``run_follow_ups``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..constants import (
    ASSISTANT_MAX_TOKENS,
    CONTEXT_HISTORY_MESSAGES,
    MessageRole,
)
from ..content.generator import CONTENT_GENERATION_PROMPT
from ..content.models import GeneratedImage, Message, Output, Project
from ..conversation import Turn, normalize_turns
from ..errors import RequestFailedError, StoreError
from ..prompts import ASSISTANT_SYSTEM_PROMPT
from ..tools import TOOL_SCHEMAS, ActionCategory, ActionExecutor, ActionResult, parse_tool_calls
from ..tools.actions import Action, AddMoreAction, RegenerateSectionAction
from .context import ContextBuilder

if TYPE_CHECKING:
    from ..carousel import CarouselOutput, CarouselService
    from ..content import OutputService
    from ..images import ImageService
    from ..prompts import PromptComposer
    from ..providers.text import TextProvider
    from ..storage import ContentStore

_logger = logging.getLogger("assistant")

TRUNCATED_REPLY = "My response was too long and got cut off. Could you try a more specific request?"
CAROUSEL_UPDATED_REPLY = "Done — I've updated the carousel slide."
CONTENT_UPDATED_REPLY = "Done — I've updated the content."
IMAGE_GENERATED_REPLY = "Done — the image has been generated."
DEFAULT_REPLY = "I processed your request."
REQUEST_FAILED_MESSAGE = "Failed to process assistant request"


@dataclass
class AssistantReply:
    """Everything one assistant request produced.

    Attributes:
        message: Text shown to the user (never empty).
        actions: Valid actions parsed from the model's tool calls.
        results: One result per action applied in-process.
        output: Refreshed Output when content actions ran.
        carousel: Refreshed carousel when a carousel action succeeded.
        images: Images generated during the request.
        follow_ups: Regenerate / add-more actions for the caller to run.
    """

    message: str
    actions: list[Action] = field(default_factory=list)
    results: list[ActionResult] = field(default_factory=list)
    output: Output | None = None
    carousel: CarouselOutput | None = None
    images: list[GeneratedImage] = field(default_factory=list)
    follow_ups: list[Action] = field(default_factory=list)


def append_image_errors(message: str, errors: list[str]) -> str:
    """Add image failures to the reply so they are visible to the user."""
    for error in errors:
        if not message:
            message = f'I tried to generate/refine the image but the model responded: "{error}"'
        else:
            message += f'\n\n(Note: The image generation model responded: "{error}")'
    return message


class AssistantOrchestrator:
    """Runs assistant requests for projects.

    Usage:
        orchestrator = AssistantOrchestrator(store, text_provider, outputs, carousels, images, composer)
        reply = await orchestrator.handle(project_id, "Make hook 2 punchier")
        if reply.follow_ups:
            await orchestrator.run_follow_ups(project_id, reply.follow_ups)
    """

    def __init__(
        self,
        store: ContentStore,
        text_provider: TextProvider,
        outputs: OutputService,
        carousels: CarouselService,
        images: ImageService | None = None,
        composer: PromptComposer | None = None,
        history_limit: int = CONTEXT_HISTORY_MESSAGES,
        max_tokens: int = ASSISTANT_MAX_TOKENS,
        context_builder: ContextBuilder | None = None,
    ):
        self.store = store
        self.text_provider = text_provider
        self.outputs = outputs
        self.carousels = carousels
        self.images = images
        self.composer = composer
        self.history_limit = history_limit
        self.max_tokens = max_tokens
        self.context_builder = context_builder or ContextBuilder(store)

    def history(self, project_id: str) -> list[Message]:
        """Stored conversation, oldest first."""
        messages = self.store.find(Message, project_id=project_id)
        return sorted(messages, key=lambda message: message.created_at)

    def system_prompt(self, project: Project) -> str:
        base = CONTENT_GENERATION_PROMPT
        if self.composer is not None:
            base = self.composer.compose(base, project.platform)
        return f"{base}\n\n{ASSISTANT_SYSTEM_PROMPT}"

    def build_turns(self, context: str, history: list[Message], message: str) -> list[Turn]:
        """Context turn, recent non-empty history, then the new message."""
        turns = [Turn(MessageRole.USER, f"{context}\n\nUser message: {message}")]
        recent = history[-self.history_limit:] if self.history_limit > 0 else []
        turns.extend(
            Turn(MessageRole(item.role), item.content)
            for item in recent
            if item.content and item.content.strip()
        )
        turns.append(Turn(MessageRole.USER, message))
        return normalize_turns(turns)

    async def handle(
        self,
        project_id: str,
        message: str,
        history: list[Message] | None = None,
    ) -> AssistantReply:
        """Process one user message.

        Args:
            project_id: Project the conversation belongs to.
            message: The user's message.
            history: Prior turns, oldest first. Loaded from the store when None.

        Returns:
            AssistantReply with the visible message and everything applied.

        Raises:
            NotFoundError: If the project does not exist.
            ProviderTimeoutError: If the model call exceeded its budget.
            RequestFailedError: If the store failed during the request.
        """
        try:
            return await self._handle(project_id, message, history)
        except StoreError as e:
            _logger.error(f"ASSISTANT_FAILED | project:{project_id} | cause:{e!r}")
            raise RequestFailedError(REQUEST_FAILED_MESSAGE) from e

    async def _handle(self, project_id: str, message: str, history: list[Message] | None) -> AssistantReply:
        project = self.store.require(Project, project_id)
        if history is None:
            history = self.history(project_id)

        self.store.put(Message(project_id=project_id, role=MessageRole.USER, content=message))

        context = self.context_builder.build(project)
        turns = self.build_turns(context, history, message)
        _logger.info(
            f"ASSISTANT_REQUEST | project:{project_id} | step:{project.current_step.value} | "
            f"turns:{len(turns)} | context_chars:{len(context)}"
        )

        reply = await self.text_provider.chat_with_tools(
            self.system_prompt(project),
            [turn.to_message() for turn in turns],
            TOOL_SCHEMAS,
            max_tokens=self.max_tokens,
        )

        text = reply.text
        if reply.truncated and not text and not reply.tool_calls:
            text = TRUNCATED_REPLY

        actions = parse_tool_calls(reply.tool_calls)
        executor = ActionExecutor(project_id, self.outputs, self.carousels, self.images)
        report = await executor.execute(actions)

        text = append_image_errors(text, report.image_errors)

        has_content_actions = any(
            action.category in (ActionCategory.CONTENT, ActionCategory.DEFERRED) for action in actions
        )
        has_image_actions = any(action.category == ActionCategory.IMAGE for action in actions)
        if not text.strip():
            if report.carousel_changed:
                text = CAROUSEL_UPDATED_REPLY
            elif has_content_actions:
                text = CONTENT_UPDATED_REPLY
            elif report.images:
                text = IMAGE_GENERATED_REPLY
            elif not has_image_actions:
                text = DEFAULT_REPLY

        self.store.put(Message(project_id=project_id, role=MessageRole.ASSISTANT, content=text))

        _logger.info(
            f"ASSISTANT_REPLY | project:{project_id} | actions:{[action.type for action in actions]} | "
            f"applied:{report.applied} | images:{len(report.images)} | follow_ups:{len(report.follow_ups)}"
        )

        return AssistantReply(
            message=text,
            actions=actions,
            results=report.results,
            output=self.outputs.get(project_id) if has_content_actions else None,
            carousel=self.carousels.get(project_id) if report.carousel_changed else None,
            images=report.images,
            follow_ups=report.follow_ups,
        )

    async def run_follow_ups(self, project_id: str, follow_ups: list[Action]) -> list[ActionResult]:
        """Run deferred regenerate / add-more actions.

        Each follow-up is isolated like any other action: a failure is
        recorded in its result and the rest still run.

        Raises:
            RequestFailedError: If the store fails.
        """
        results: list[ActionResult] = []
        for action in follow_ups:
            try:
                if isinstance(action, RegenerateSectionAction):
                    output = await self.outputs.regenerate_section(project_id, action.content_type)
                elif isinstance(action, AddMoreAction):
                    output = await self.outputs.add_more(project_id, action.content_type)
                else:
                    raise ValueError(f"{action.type} is not a follow-up action")
                results.append(ActionResult(action=action.type, success=True, result=output))
            except StoreError as e:
                _logger.error(f"FOLLOW_UP_FAILED | project:{project_id} | cause:{e!r}")
                raise RequestFailedError(REQUEST_FAILED_MESSAGE) from e
            except Exception as e:
                _logger.warning(f"FOLLOW_UP_ERROR | project:{project_id} | action:{action.type} | error:{e}")
                results.append(ActionResult(action=action.type, success=False, error=str(e)))
        return results
