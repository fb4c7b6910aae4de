"""Chat endpoint driving the AI-command interpreter."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import AliasChoices, BaseModel, Field

from src.core.config import constants
from src.core.errors import AuthenticationRequiredError
from src.domain.task import ChatMessage, TaskOutcome
from src.interface.dependencies import get_interpreter
from src.interpreter import PantryInterpreter


router = APIRouter(prefix="/api/chat", tags=["chat"])
logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    """Chat turn submitted by the web tier."""

    messages: list[ChatMessage] = Field(..., min_length=1, description="Conversation history, oldest first")
    owner_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ownerId", "userId", "owner_id"),
        description="ID of the authenticated user",
    )


class ChatResponse(BaseModel):
    """Assistant reply plus the outcome of every task that was attempted."""

    reply: str
    tasks: list[TaskOutcome] = Field(default_factory=list)


def require_chat_owner(request: ChatRequest) -> str:
    """Reject chat turns without a user before the interpreter is assembled."""
    if not request.owner_id:
        logger.warning("chat_rejected", extra={"reason": "missing_owner_id"})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=constants.AUTH_REQUIRED_MESSAGE)
    return request.owner_id


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    owner_id: str = Depends(require_chat_owner),
    interpreter: PantryInterpreter = Depends(get_interpreter),
) -> ChatResponse:
    """Interpret one chat turn and apply the resulting pantry changes.

    Returns 401 without calling the model when no user is given, and 400 with
    the failing task's message when a task batch stops early. Tasks committed
    before the failure remain applied.

    Raises:
        HTTPException: If the user is missing or a task fails
    """
    try:
        result = await interpreter.interpret(request.messages, owner_id)
    except AuthenticationRequiredError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e

    failed = result.failed_outcome
    if failed is not None:
        logger.warning(
            "chat_task_failed",
            extra={"user_id": owner_id, "error_code": failed.error_code, "message": failed.message},
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=failed.message)

    return ChatResponse(reply=result.reply_text, tasks=result.task_outcomes)
