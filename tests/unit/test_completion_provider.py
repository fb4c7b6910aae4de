"""Unit tests for the completion provider."""

import pytest
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)
from pydantic_ai.models.function import AgentInfo, FunctionModel

from src.agents.completion_provider import (
    PydanticAICompletionProvider,
    build_completion_provider,
    to_model_messages,
)
from src.core.config import Settings
from src.domain.task import ChatMessage


@pytest.mark.unit
class TestToModelMessages:
    """Tests for chat history conversion."""

    def test_roles_map_to_message_kinds(self):
        """Test each role becomes the matching pydantic-ai message part."""
        history = to_model_messages(
            [
                ChatMessage(role="system", content="be brief"),
                ChatMessage(role="user", content="hi"),
                ChatMessage(role="assistant", content="hello"),
            ]
        )

        assert isinstance(history[0], ModelRequest)
        assert isinstance(history[0].parts[0], SystemPromptPart)
        assert isinstance(history[1], ModelRequest)
        assert isinstance(history[1].parts[0], UserPromptPart)
        assert history[1].parts[0].content == "hi"
        assert isinstance(history[2], ModelResponse)
        assert isinstance(history[2].parts[0], TextPart)
        assert history[2].parts[0].content == "hello"

    def test_empty_history(self):
        """Test no messages convert to an empty history."""
        assert to_model_messages([]) == []


@pytest.mark.unit
class TestPydanticAICompletionProvider:
    """Tests for the pydantic-ai backed provider."""

    async def test_returns_model_text(self):
        """Test the model's text output is returned verbatim."""

        def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
            return ModelResponse(parts=[TextPart(content='{"response": "Hi there"}')])

        provider = PydanticAICompletionProvider(model=FunctionModel(respond))

        result = await provider.complete("system", [ChatMessage(role="user", content="hello")])

        assert result == '{"response": "Hi there"}'

    async def test_history_and_prompt_sent(self):
        """Test earlier turns are sent as history and the last turn as the prompt."""
        seen: list[ModelMessage] = []

        def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
            seen.extend(messages)
            return ModelResponse(parts=[TextPart(content="ok")])

        provider = PydanticAICompletionProvider(model=FunctionModel(respond))

        await provider.complete(
            "You are a pantry assistant.",
            [
                ChatMessage(role="user", content="add rice"),
                ChatMessage(role="assistant", content="Added rice."),
                ChatMessage(role="user", content="and beans"),
            ],
        )

        user_prompts = [
            part.content
            for message in seen
            if isinstance(message, ModelRequest)
            for part in message.parts
            if isinstance(part, UserPromptPart)
        ]
        assert user_prompts == ["add rice", "and beans"]
        assert any(isinstance(message, ModelResponse) for message in seen)
        assert seen[-1].instructions == "You are a pantry assistant."

    async def test_provider_errors_propagate(self):
        """Test model failures surface to the caller unchanged."""

        def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
            raise ConnectionError("upstream unreachable")

        provider = PydanticAICompletionProvider(model=FunctionModel(respond))

        with pytest.raises(ConnectionError, match="upstream unreachable"):
            await provider.complete("system", [ChatMessage(role="user", content="hi")])

    async def test_empty_messages_rejected(self):
        """Test a completion needs at least one message."""
        provider = PydanticAICompletionProvider(model=FunctionModel(lambda messages, info: None))

        with pytest.raises(ValueError, match="At least one message"):
            await provider.complete("system", [])


@pytest.mark.unit
class TestBuildCompletionProvider:
    """Tests for build_completion_provider function."""

    def test_missing_api_key_raises(self):
        """Test the OpenRouter key is required."""
        settings = Settings(openrouter_api_key=None)

        with pytest.raises(ValueError, match="OPENROUTER_API_KEY"):
            build_completion_provider(settings)

    def test_builds_provider_with_key(self):
        """Test a provider is built when the key is set."""
        settings = Settings(openrouter_api_key="sk-test", model_provider="together")

        provider = build_completion_provider(settings)

        assert isinstance(provider, PydanticAICompletionProvider)
