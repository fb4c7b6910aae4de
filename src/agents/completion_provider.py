"""Completion provider: turns a system prompt plus chat history into completion text.

The provider is constructed explicitly and handed to the interpreter, so tests
can swap in a fake or a pydantic-ai ``FunctionModel``.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from pydantic_ai import Agent
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)
from pydantic_ai.models import Model
from pydantic_ai.models.openrouter import OpenRouterModel, OpenRouterModelSettings
from pydantic_ai.providers.openrouter import OpenRouterProvider
from pydantic_ai.settings import ModelSettings

from src.core.config import Settings
from src.core.logging import span
from src.domain.task import ChatMessage


logger = logging.getLogger(__name__)


class CompletionProvider(Protocol):
    """Black-box chat completion call. No retry is applied at this layer."""

    async def complete(self, system_prompt: str, messages: Sequence[ChatMessage]) -> str: ...


def to_model_messages(messages: Sequence[ChatMessage]) -> list[ModelMessage]:
    """Convert role/content chat turns into pydantic-ai message history."""
    history: list[ModelMessage] = []
    for message in messages:
        if message.role == "assistant":
            history.append(ModelResponse(parts=[TextPart(content=message.content)]))
        elif message.role == "system":
            history.append(ModelRequest(parts=[SystemPromptPart(content=message.content)]))
        else:
            history.append(ModelRequest(parts=[UserPromptPart(content=message.content)]))
    return history


class PydanticAICompletionProvider:
    """CompletionProvider backed by a pydantic-ai Agent with plain-text output."""

    def __init__(self, *, model: Model | str, model_settings: ModelSettings | None = None) -> None:
        # Provider failures are surfaced to the interpreter as-is
        self._agent: Agent[None, str] = Agent(model=model, retries=0)
        self._model_settings = model_settings

    async def complete(self, system_prompt: str, messages: Sequence[ChatMessage]) -> str:
        """Run one completion over the conversation.

        The last message is sent as the prompt; earlier turns are passed as history.

        Raises:
            ValueError: If ``messages`` is empty
        """
        if not messages:
            raise ValueError("At least one message is required")

        *earlier, latest = messages
        with span("completion_provider.complete", message_count=len(messages)):
            result = await self._agent.run(
                latest.content,
                message_history=to_model_messages(earlier),
                instructions=system_prompt,
                model_settings=self._model_settings,
            )
        logger.info("completion_received", extra={"length": len(result.output)})
        return result.output


def build_completion_provider(settings: Settings) -> PydanticAICompletionProvider:
    """Create the OpenRouter-backed provider from application settings.

    Raises:
        ValueError: If the OpenRouter API key is not configured
    """
    api_key = settings.require_credential("openrouter_api_key", "OpenRouter API key")
    provider = OpenRouterProvider(api_key=api_key)

    model_settings = OpenRouterModelSettings(
        max_tokens=settings.completion_max_tokens,
        temperature=settings.completion_temperature,
    )
    # Configure provider routing if specified
    if settings.model_provider:
        model_settings["openrouter_provider"] = {"only": [settings.model_provider]}

    model = OpenRouterModel(model_name=settings.model_id, provider=provider)
    return PydanticAICompletionProvider(model=model, model_settings=model_settings)
