"""Domain models and DTOs."""

from src.domain.pantry import InventoryItem, PantrySummary, Recipe, normalize_item_name
from src.domain.task import (
    ChatMessage,
    InterpreterResult,
    Task,
    TaskAction,
    TaskOutcome,
    TaskRejection,
    UpdateAction,
)


__all__ = [
    "ChatMessage",
    "InterpreterResult",
    "InventoryItem",
    "PantrySummary",
    "Recipe",
    "Task",
    "TaskAction",
    "TaskOutcome",
    "TaskRejection",
    "UpdateAction",
    "normalize_item_name",
]
