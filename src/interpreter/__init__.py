"""AI-command interpreter for natural-language pantry edits."""

from src.interpreter.executor import TaskExecutor
from src.interpreter.extractor import extract_payload
from src.interpreter.interpreter import PantryInterpreter
from src.interpreter.validator import ParsedPayload, parse_payload


__all__ = [
    "PantryInterpreter",
    "ParsedPayload",
    "TaskExecutor",
    "extract_payload",
    "parse_payload",
]
