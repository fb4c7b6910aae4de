"""AI-command interpreter: completion -> payload -> tasks -> store mutations."""

import logging
from collections.abc import Sequence

from src.agents.completion_provider import CompletionProvider
from src.agents.prompts import SYSTEM_PROMPT
from src.core.config import constants
from src.core.errors import AuthenticationRequiredError, PayloadParseError, classify_agent_error
from src.core.logging import span
from src.domain.task import ChatMessage, InterpreterResult
from src.interpreter.executor import TaskExecutor
from src.interpreter.extractor import extract_payload
from src.interpreter.validator import parse_payload


logger = logging.getLogger(__name__)


class PantryInterpreter:
    """Turns one chat turn into a reply plus committed inventory mutations.

    Data flows strictly downstream within an invocation: provider, extractor,
    validator, executor. Task batches are fail-fast and non-transactional.
    """

    def __init__(
        self,
        *,
        provider: CompletionProvider,
        executor: TaskExecutor,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        self.provider = provider
        self.executor = executor
        self.system_prompt = system_prompt

    async def interpret(self, messages: Sequence[ChatMessage], owner_id: str | None) -> InterpreterResult:
        """Run one chat turn for ``owner_id``.

        Args:
            messages: Conversation history, oldest first, ending with the user's message
            owner_id: ID of the authenticated user whose pantry may be mutated

        Returns:
            InterpreterResult with the reply and one outcome per attempted task

        Raises:
            AuthenticationRequiredError: If no owner identity is supplied
        """
        if not owner_id:
            raise AuthenticationRequiredError(constants.AUTH_REQUIRED_MESSAGE)

        with span("pantry_interpreter.interpret", owner_id=owner_id):
            try:
                completion = await self.provider.complete(self.system_prompt, messages)
            except Exception as e:
                error_category, user_message = classify_agent_error(e)
                logger.error(
                    "Completion provider failed",
                    extra={"error": str(e), "error_category": error_category.value, "owner_id": owner_id},
                )
                return InterpreterResult(reply_text=user_message)

            candidate = extract_payload(completion)
            try:
                payload = parse_payload(candidate)
            except PayloadParseError as e:
                logger.info(
                    "completion_payload_unparsed",
                    extra={"reason": type(e).__name__, "owner_id": owner_id},
                )
                return InterpreterResult(reply_text=completion)

            outcomes = await self.executor.execute_batch(payload.tasks, owner_id)

        return InterpreterResult(reply_text=payload.response or constants.DEFAULT_REPLY, task_outcomes=outcomes)
