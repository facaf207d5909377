"""Tests for TextProvider fallback, tool-call mapping and timeouts.

Model backends are replaced with mocks: Agno model creation is patched for
structured calls and the OpenAI client is patched for tool-calling chats.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import BaseModel

from socials_studio.errors import ProviderTimeoutError
from socials_studio.providers.config import ProviderConfig, ProviderSettings, TextProviderConfig
from socials_studio.providers.text import ModelReply, TextProvider, parse_tool_arguments


class Headline(BaseModel):
    text: str


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def config() -> ProviderConfig:
    """Two enabled providers with fallback on."""
    return ProviderConfig(
        provider_settings=ProviderSettings(timeout_seconds=30, fallback_on_error=True),
        text_providers={
            "second": TextProviderConfig(priority=2, model="openai/model-b", api_key="key-b"),
            "first": TextProviderConfig(priority=1, model="openai/model-a", api_key="key-a"),
            "disabled": TextProviderConfig(priority=0, enabled=False, model="openai/model-x"),
        },
    )


@pytest.fixture
def config_no_fallback(config: ProviderConfig) -> ProviderConfig:
    config.provider_settings.fallback_on_error = False
    return config


def completion(content: str | None = None, tool_calls=None, finish_reason: str = "stop"):
    """Minimal chat completion object."""
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason=finish_reason)])


def tool_call(name: str, arguments: str):
    return SimpleNamespace(function=SimpleNamespace(name=name, arguments=arguments))


def openai_client(create: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = create
    return client


# =============================================================================
# Tool-call mapping
# =============================================================================


class TestToReply:
    """Tests for converting chat completions into ModelReply."""

    def test_text_only(self):
        reply = TextProvider._to_reply(completion("Hello"))
        assert reply == ModelReply(text="Hello", tool_calls=[], stop_reason="end_turn")

    def test_tool_calls_in_order(self):
        reply = TextProvider._to_reply(completion(
            None,
            [
                tool_call("select_card", '{"content_type": "hook", "index": 0}'),
                tool_call("remove_card", '{"content_type": "cta", "index": 1}'),
            ],
            finish_reason="tool_calls",
        ))

        assert reply.text == ""
        assert reply.stop_reason == "tool_use"
        assert [call.name for call in reply.tool_calls] == ["select_card", "remove_card"]
        assert reply.tool_calls[0].arguments == {"content_type": "hook", "index": 0}

    def test_length_is_truncated(self):
        reply = TextProvider._to_reply(completion("Partial", finish_reason="length"))
        assert reply.truncated


class TestParseToolArguments:
    """Tests for parse_tool_arguments."""

    @pytest.mark.parametrize("raw,expected", [
        ('{"index": 2}', {"index": 2}),
        ({"index": 2}, {"index": 2}),
        ('```json\n{"index": 2}\n```', {"index": 2}),
        ("", {}),
        (None, {}),
        ("not json", {}),
        ("[1, 2]", {}),
    ])
    def test_parse(self, raw, expected):
        assert parse_tool_arguments(raw) == expected


# =============================================================================
# Fallback
# =============================================================================


class TestStructuredFallback:
    """Tests for generate_structured provider fallback."""

    @pytest.mark.asyncio
    async def test_falls_back_to_next_provider(self, config):
        agent = MagicMock()
        agent.arun = AsyncMock(side_effect=[
            RuntimeError("rate limited"),
            SimpleNamespace(content=Headline(text="Works")),
        ])
        events: list[dict] = []

        async def on_event(event):
            events.append(event)

        provider = TextProvider(config, event_callback=on_event)
        with patch("socials_studio.providers.text._create_agno_model", return_value=MagicMock(id="m")), \
                patch("agno.agent.Agent", return_value=agent):
            result = await provider.generate_structured("Write a headline", Headline)

        assert result == Headline(text="Works")
        assert provider.current_provider == "second"
        assert [event["type"] for event in events] == ["text_call", "text_error", "text_call", "text_response"]
        assert events[2]["failed_providers"] == ["first"]

    @pytest.mark.asyncio
    async def test_dict_content_is_validated(self, config):
        agent = MagicMock()
        agent.arun = AsyncMock(return_value=SimpleNamespace(content={"text": "From dict"}))

        provider = TextProvider(config)
        with patch("socials_studio.providers.text._create_agno_model", return_value=MagicMock(id="m")), \
                patch("agno.agent.Agent", return_value=agent):
            result = await provider.generate_structured("Write a headline", Headline)

        assert result == Headline(text="From dict")

    @pytest.mark.asyncio
    async def test_no_fallback_raises_first_error(self, config_no_fallback):
        agent = MagicMock()
        agent.arun = AsyncMock(side_effect=RuntimeError("boom"))

        provider = TextProvider(config_no_fallback)
        with patch("socials_studio.providers.text._create_agno_model", return_value=MagicMock(id="m")), \
                patch("agno.agent.Agent", return_value=agent):
            with pytest.raises(RuntimeError, match="boom"):
                await provider.generate_structured("Write a headline", Headline)

        assert agent.arun.await_count == 1

    @pytest.mark.asyncio
    async def test_no_enabled_providers(self):
        provider = TextProvider(ProviderConfig())
        with pytest.raises(RuntimeError, match="No text providers"):
            await provider.generate_structured("x", Headline)


class TestChatWithTools:
    """Tests for chat_with_tools."""

    @pytest.mark.asyncio
    async def test_sends_system_turns_and_tools(self, config):
        create = AsyncMock(return_value=completion("Hi there"))
        tools = [{"type": "function", "function": {"name": "edit_card", "parameters": {}}}]

        provider = TextProvider(config)
        with patch("openai.AsyncOpenAI", return_value=openai_client(create)):
            reply = await provider.chat_with_tools("Be brief.", [{"role": "user", "content": "Hello"}], tools)

        assert reply.text == "Hi there"
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "model-a"
        assert kwargs["messages"][0] == {"role": "system", "content": "Be brief."}
        assert kwargs["messages"][1] == {"role": "user", "content": "Hello"}
        assert kwargs["tools"] == tools

    @pytest.mark.asyncio
    async def test_falls_back_to_next_provider(self, config):
        create = AsyncMock(side_effect=[ConnectionError("down"), completion("From second")])

        provider = TextProvider(config)
        with patch("openai.AsyncOpenAI", return_value=openai_client(create)):
            reply = await provider.chat_with_tools("sys", [{"role": "user", "content": "Hi"}], [])

        assert reply.text == "From second"
        assert provider.current_model == "model-b"

    @pytest.mark.asyncio
    async def test_timeout(self, config_no_fallback):
        create = AsyncMock(side_effect=asyncio.TimeoutError())

        provider = TextProvider(config_no_fallback)
        with patch("openai.AsyncOpenAI", return_value=openai_client(create)):
            with pytest.raises(ProviderTimeoutError) as exc_info:
                await provider.chat_with_tools("sys", [{"role": "user", "content": "Hi"}], [], task="assistant")

        assert exc_info.value.operation == "assistant"
        assert exc_info.value.timeout_seconds == 30

    @pytest.mark.asyncio
    async def test_timeout_after_all_fallbacks(self, config):
        create = AsyncMock(side_effect=[RuntimeError("down"), asyncio.TimeoutError()])

        provider = TextProvider(config)
        with patch("openai.AsyncOpenAI", return_value=openai_client(create)):
            with pytest.raises(ProviderTimeoutError):
                await provider.chat_with_tools("sys", [{"role": "user", "content": "Hi"}], [])
