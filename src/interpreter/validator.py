"""Parse and validate the structured payload of a completion."""

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from src.core.errors import ExtractionAmbiguityError, SchemaViolationError
from src.domain.pantry import is_valid_amount
from src.domain.task import Task, TaskAction, TaskRejection, UpdateAction


logger = logging.getLogger(__name__)


class CompletionPayload(BaseModel):
    """Top-level shape of the structured payload."""

    model_config = ConfigDict(extra="ignore")

    response: StrictStr | None = None
    tasks: list[Any] | None = None


@dataclass
class ParsedPayload:
    """Reply text plus the validated tasks, in payload order."""

    response: str | None
    tasks: list[Task | TaskRejection] = field(default_factory=list)


def _coerce_number(value: object) -> int | float | None:
    """Return ``value`` as a number, or None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def validate_task(raw: object) -> Task | TaskRejection | None:
    """Validate one task entry.

    Returns:
        A Task ready for execution, a TaskRejection carrying the failure
        message, or None when the entry is not a recognized task and should be
        skipped without an outcome.
    """
    if not isinstance(raw, dict):
        logger.info("task_skipped", extra={"reason": "not_an_object"})
        return None

    try:
        action = TaskAction(raw.get("action"))
    except ValueError:
        logger.info("task_skipped", extra={"reason": "unrecognized_action", "action": str(raw.get("action"))})
        return None

    raw_name = raw.get("itemName")
    if not isinstance(raw_name, str) or not raw_name.strip():
        return TaskRejection(
            action=action,
            item_name=str(raw_name or ""),
            message=f"Invalid item name for {action} task.",
        )

    count = _coerce_number(raw.get("itemCount"))

    if action == TaskAction.ADD:
        if count is None or (isinstance(count, float) and math.isnan(count)):
            count = 1
        if not is_valid_amount(count):
            return TaskRejection(action=action, item_name=raw_name, message=f"Invalid quantity for {raw_name}.")
        return Task(action=action, item_name=raw_name, item_count=count)

    if action == TaskAction.UPDATE:
        if not is_valid_amount(count):
            return TaskRejection(action=action, item_name=raw_name, message=f"Invalid quantity for {raw_name}.")
        try:
            update_action = UpdateAction(raw.get("updateAction"))
        except ValueError:
            update_action = None
        return Task(action=action, item_name=raw_name, item_count=count, update_action=update_action)

    return Task(action=action, item_name=raw_name)


def parse_payload(candidate: str) -> ParsedPayload:
    """Parse an extracted candidate into reply text and validated tasks.

    Raises:
        ExtractionAmbiguityError: If the candidate holds no structured payload at all
        SchemaViolationError: If the payload is malformed or its fields are mistyped
    """
    try:
        data = json.loads(candidate)
    except ValueError as e:
        # JSONDecodeError, or an integer literal past the digit limit
        if "{" not in candidate:
            raise ExtractionAmbiguityError("No structured payload found in completion") from e
        raise SchemaViolationError(f"Malformed structured payload: {e}") from e

    if not isinstance(data, dict):
        raise SchemaViolationError(f"Structured payload must be an object, got {type(data).__name__}")

    try:
        payload = CompletionPayload.model_validate(data)
    except ValidationError as e:
        raise SchemaViolationError(f"Structured payload has invalid fields: {e}") from e

    tasks = [task for task in (validate_task(raw) for raw in payload.tasks or []) if task is not None]
    return ParsedPayload(response=payload.response, tasks=tasks)
