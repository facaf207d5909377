"""Text generation provider.

Structured generation goes through Agno's unified model interface. The
assistant's tool-calling chat uses the OpenAI chat completions API, which
every configured backend exposes (natively or through its OpenAI
compatible endpoint), so tool schemas stay in one format.

Every call runs under the configured timeout. A call that exceeds it is
abandoned locally (it may still finish remotely) and surfaces as
ProviderTimeoutError.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from ..errors import ProviderTimeoutError
from ..utils import extract_json
from .config import ProviderConfig, TextProviderConfig, load_provider_config

_logger = logging.getLogger("ai_calls")

# Type for AI event callback
AIEventCallback = Callable[[dict[str, Any]], Awaitable[None]] | None

# OpenAI compatible endpoints for providers without a configured base_url
OPENAI_COMPATIBLE_URLS: dict[str, str | None] = {
    "openai": None,
    "anthropic": "https://api.anthropic.com/v1/",
    "groq": "https://api.groq.com/openai/v1",
    "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
    "deepseek": "https://api.deepseek.com/v1",
    "lmstudio": "http://localhost:1234/v1",
    "ollama": "http://localhost:11434/v1",
}


@dataclass
class ToolInvocation:
    """A named tool call emitted by the model."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass
class ModelReply:
    """Text and tool calls returned by one chat call.

    Attributes:
        text: Free text (may be empty).
        tool_calls: Tool invocations in the order the model emitted them.
        stop_reason: "end_turn", "tool_use" or "max_tokens".
    """

    text: str = ""
    tool_calls: list[ToolInvocation] = field(default_factory=list)
    stop_reason: str = "end_turn"

    @property
    def truncated(self) -> bool:
        return self.stop_reason == "max_tokens"


def parse_tool_arguments(raw: str | dict[str, Any] | None) -> dict[str, Any]:
    """Decode a tool call's argument payload; anything unreadable becomes {}."""
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        parsed = extract_json(raw)
    except ValueError:
        _logger.warning(f"TOOL_ARGS_UNREADABLE | raw:{raw[:200]}")
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _create_agno_model(provider_name: str, provider_config: TextProviderConfig) -> Any:
    """Create an Agno model instance for the given provider."""
    model_id = provider_config.model_id
    api_key = provider_config.get_api_key()
    base_url = provider_config.get_base_url()

    # Import Agno models lazily, only the selected backend is needed
    if provider_name == "openai":
        from agno.models.openai import OpenAIChat
        return OpenAIChat(id=model_id, api_key=api_key)

    elif provider_name == "anthropic":
        from agno.models.anthropic import Claude
        return Claude(id=model_id, api_key=api_key)

    elif provider_name == "groq":
        from agno.models.groq import Groq
        return Groq(id=model_id, api_key=api_key)

    elif provider_name == "gemini":
        from agno.models.google import Gemini
        return Gemini(id=model_id, api_key=api_key)

    elif provider_name == "ollama":
        from agno.models.ollama import Ollama
        return Ollama(id=model_id, host=base_url or "http://localhost:11434")

    else:
        # LMStudio, DeepSeek and anything else OpenAI compatible
        from agno.models.openai.like import OpenAILike
        return OpenAILike(
            id=model_id,
            api_key=api_key or "not-needed",
            base_url=base_url or OPENAI_COMPATIBLE_URLS.get(provider_name),
        )


class TextProvider:
    """Text generation over the configured backends, in priority order.

    Usage:
        provider = TextProvider(load_provider_config())
        plan = await provider.generate_structured(prompt, MyResponseModel)
        reply = await provider.chat_with_tools(system, turns, TOOL_SCHEMAS)

    Both calls walk the enabled backends; a failure moves on to the next
    one when ``fallback_on_error`` is set, otherwise it is raised at once.
    """

    def __init__(
        self,
        config: ProviderConfig | None = None,
        event_callback: AIEventCallback = None,
    ):
        self.config = config or load_provider_config()
        self._event_callback = event_callback
        self._current_provider: str | None = None
        self._current_model: str | None = None

    @property
    def timeout_seconds(self) -> int:
        return self.config.provider_settings.timeout_seconds

    async def _emit_event(self, event: dict[str, Any]) -> None:
        """Emit an AI event if callback is set."""
        if self._event_callback:
            await self._event_callback(event)

    async def _with_timeout(self, operation: str, coro: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            _logger.error(f"AI_TIMEOUT | operation:{operation} | timeout:{self.timeout_seconds}s")
            raise ProviderTimeoutError(operation, self.timeout_seconds) from None

    async def _run_with_fallback(
        self,
        task: str,
        call: Callable[[str, TextProviderConfig], Awaitable[Any]],
        **event_fields: Any,
    ) -> Any:
        """Run ``call`` against each enabled backend until one succeeds.

        Raises:
            RuntimeError: If no text backend is enabled.
            Exception: The last backend's error when every backend failed.
        """
        chain = self.config.text_chain()
        if not chain:
            raise RuntimeError("No text providers are enabled")

        failed_providers: list[str] = []
        last_error: Exception | None = None
        for provider_name, provider_config in chain:
            self._current_provider = provider_name
            self._current_model = provider_config.model_id
            await self._emit_event({
                "type": "text_call",
                "provider": provider_name,
                "model": provider_config.model_id,
                "task": task,
                "failed_providers": failed_providers.copy(),
                **event_fields,
            })

            start_time = time.time()
            try:
                result = await call(provider_name, provider_config)
            except Exception as e:
                last_error = e
                failed_providers.append(provider_name)
                _logger.warning(f"AI_ERROR | provider:{provider_name} | task:{task} | error:{e}")
                await self._emit_event({
                    "type": "text_error",
                    "provider": provider_name,
                    "error": str(e)[:100],
                    "failed_providers": failed_providers.copy(),
                })
                if not self.config.provider_settings.fallback_on_error:
                    raise
                continue

            await self._emit_event({
                "type": "text_response",
                "provider": provider_name,
                "model": provider_config.model_id,
                "duration_seconds": time.time() - start_time,
                **event_fields,
            })
            return result

        raise last_error

    async def generate_structured(
        self,
        prompt: str,
        response_model: type[BaseModel],
        system: str | None = None,
        task: str | None = None,
    ) -> BaseModel:
        """Generate output matching a Pydantic model through an Agno agent.

        Args:
            prompt: The user prompt to send to the model.
            response_model: Pydantic model class for the response.
            system: Optional system prompt.
            task: Optional task name for logs and events.

        Returns:
            Instance of response_model.

        Raises:
            ProviderTimeoutError: If the last backend tried timed out.
        """
        from agno.agent import Agent

        task = task or "structured"

        async def call(provider_name: str, provider_config: TextProviderConfig) -> BaseModel:
            model = _create_agno_model(provider_name, provider_config)
            _logger.info(
                f"AI_REQUEST_STRUCTURED | provider:{provider_name} | model:{provider_config.model_id} | "
                f"task:{task} | response_model:{response_model.__name__}\n"
                f"--- SYSTEM ---\n{system or '(none)'}\n"
                f"--- PROMPT ---\n{prompt}\n"
                f"--- END REQUEST ---"
            )
            agent = Agent(model=model, instructions=system, output_schema=response_model, markdown=False)
            response = await self._with_timeout(task, agent.arun(prompt))

            result = response.content
            if not isinstance(result, response_model):
                result = response_model.model_validate(result)
            _logger.info(
                f"AI_RESPONSE_STRUCTURED | provider:{provider_name} | task:{task}\n"
                f"--- RESPONSE (JSON) ---\n{result.model_dump_json(indent=2)}\n"
                f"--- END RESPONSE ---"
            )
            return result

        return await self._run_with_fallback(task, call, structured=True)

    async def chat_with_tools(
        self,
        system: str,
        turns: list[dict[str, str]],
        tools: list[dict[str, Any]],
        max_tokens: int = 4096,
        task: str | None = "assistant",
    ) -> ModelReply:
        """Run one chat turn with function calling.

        Args:
            system: System prompt.
            turns: Strictly alternating {role, content} turns, oldest first.
            tools: Tool definitions in OpenAI function calling format.
            max_tokens: Maximum tokens to generate.
            task: Optional task name for logs and events.

        Returns:
            The model's text and tool invocations.

        Raises:
            ProviderTimeoutError: If the last backend tried timed out.
        """
        from openai import AsyncOpenAI

        task = task or "chat"
        messages = [{"role": "system", "content": system}, *turns]

        async def call(provider_name: str, provider_config: TextProviderConfig) -> ModelReply:
            client = AsyncOpenAI(
                api_key=provider_config.get_api_key() or "not-needed",
                base_url=provider_config.get_base_url() or OPENAI_COMPATIBLE_URLS.get(provider_name),
            )
            _logger.info(
                f"AI_REQUEST_TOOLS | provider:{provider_name} | model:{provider_config.model_id} | "
                f"task:{task} | turns:{len(turns)} | tools:{len(tools)}\n"
                f"--- SYSTEM ---\n{system}\n"
                f"--- LAST TURN ---\n{turns[-1]['content'] if turns else '(none)'}\n"
                f"--- END REQUEST ---"
            )
            response = await self._with_timeout(
                task,
                client.chat.completions.create(
                    model=provider_config.model_id,
                    messages=messages,
                    tools=tools,
                    max_tokens=max_tokens,
                ),
            )
            reply = self._to_reply(response)
            _logger.info(
                f"AI_RESPONSE_TOOLS | provider:{provider_name} | stop:{reply.stop_reason} | "
                f"tool_calls:{[call.name for call in reply.tool_calls]}\n"
                f"--- RESPONSE ---\n{reply.text}\n"
                f"--- END RESPONSE ---"
            )
            return reply

        return await self._run_with_fallback(task, call, tools=len(tools))

    @staticmethod
    def _to_reply(response: Any) -> ModelReply:
        """Convert a chat completion into a ModelReply."""
        choice = response.choices[0]
        message = choice.message
        tool_calls = [
            ToolInvocation(
                name=call.function.name,
                arguments=parse_tool_arguments(call.function.arguments),
            )
            for call in (message.tool_calls or [])
        ]

        if choice.finish_reason == "length":
            stop_reason = "max_tokens"
        elif tool_calls:
            stop_reason = "tool_use"
        else:
            stop_reason = "end_turn"

        return ModelReply(text=message.content or "", tool_calls=tool_calls, stop_reason=stop_reason)

    @property
    def current_provider(self) -> str | None:
        """Name of the backend used by the latest call."""
        return self._current_provider

    @property
    def current_model(self) -> str | None:
        return self._current_model
