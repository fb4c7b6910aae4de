"""Inventory task models produced by the AI-command interpreter."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field


class TaskAction(StrEnum):
    """Inventory mutation a task performs."""

    ADD = "add"
    DELETE = "delete"
    UPDATE = "update"


class UpdateAction(StrEnum):
    """Direction hint emitted alongside update tasks.

    Informational only: ``item_count`` on an update is the new absolute amount.
    """

    INCREASE = "increase"
    DECREASE = "decrease"


@dataclass(frozen=True)
class Task:
    """A validated inventory mutation, consumed within a single interpreter invocation."""

    action: TaskAction
    item_name: str
    item_count: int | float | None = None
    update_action: UpdateAction | None = None


@dataclass(frozen=True)
class TaskRejection:
    """A task that failed validation and must not reach the store."""

    action: TaskAction
    item_name: str
    message: str


class TaskOutcome(BaseModel):
    """Result of executing (or rejecting) one task."""

    success: bool
    message: str
    error_code: str | None = None

    @classmethod
    def ok(cls, message: str) -> "TaskOutcome":
        return cls(success=True, message=message)

    @classmethod
    def failed(cls, message: str, error_code: str) -> "TaskOutcome":
        return cls(success=False, message=message, error_code=error_code)


class InterpreterResult(BaseModel):
    """Reply text plus per-task outcomes, ordered like the input task list."""

    reply_text: str
    task_outcomes: list[TaskOutcome] = Field(default_factory=list)

    @property
    def failed_outcome(self) -> TaskOutcome | None:
        """The outcome that terminated the batch, if any."""
        return next((outcome for outcome in self.task_outcomes if not outcome.success), None)


class ChatMessage(BaseModel):
    """One turn of conversation history."""

    role: Literal["user", "assistant", "system"]
    content: str
