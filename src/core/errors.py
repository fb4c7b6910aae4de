"""Error taxonomy and classification utilities."""

from enum import Enum
from typing import Literal


class PantryError(Exception):
    """Base class for pantry tracker errors."""


class AuthenticationRequiredError(PantryError):
    """Raised when a request carries no owning user identity."""


class PayloadParseError(PantryError):
    """Raised when a completion does not hold a usable structured payload."""


class ExtractionAmbiguityError(PayloadParseError):
    """No structured payload could be found in the completion."""


class SchemaViolationError(PayloadParseError):
    """A payload was found but its structure or field types are wrong."""


class ErrorCategory(Enum):
    """Categories of errors that can occur while calling the completion provider."""

    SERVICE_QUOTA_EXCEEDED = "service_quota_exceeded"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    AUTHENTICATION_FAILED = "authentication_failed"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


class ErrorCode:
    """Error codes attached to failed task outcomes."""

    ERR_TASK_INVALID = "ERR_TASK_INVALID"
    ERR_STORE_FAILURE = "ERR_STORE_FAILURE"
    ERR_ITEM_NOT_FOUND = "ERR_ITEM_NOT_FOUND"


_ERROR_PATTERNS: dict[
    Literal["quota", "rate_limit", "auth", "network"],
    dict[str, list[str] | set[str]],
] = {
    "quota": {
        "phrases": [
            "quota exceeded",
            "insufficient credits",
            "credit limit",
            "credits exhausted",
            "out of credits",
            "402",
        ],
        "exception_types": set(),
    },
    "rate_limit": {
        "phrases": [
            "rate limit",
            "too many requests",
            "rate_limit_exceeded",
            "throttled",
            "429",
        ],
        "exception_types": set(),
    },
    "auth": {
        "phrases": [
            "authentication failed",
            "invalid api key",
            "unauthorized",
            "invalid token",
            "api key",
            "401",
        ],
        "exception_types": {"AuthenticationError", "PermissionError"},
    },
    "network": {
        "phrases": [
            "connection",
            "timeout",
            "network",
            "503",
            "502",
            "504",
            "unreachable",
        ],
        "exception_types": {"ConnectionError", "TimeoutError", "ConnectError", "ReadTimeout"},
    },
}


def _match_error_pattern(
    *,
    error_str: str,
    exception_type: str,
    pattern_type: Literal["quota", "rate_limit", "auth", "network"],
) -> bool:
    """Return True if the error matches the configured pattern type."""
    patterns = _ERROR_PATTERNS[pattern_type]
    return any(phrase in error_str for phrase in patterns["phrases"]) or exception_type in patterns["exception_types"]


def classify_agent_error(exception: Exception) -> tuple[ErrorCategory, str]:
    """Classify a completion provider error and return a user-friendly message.

    Inspects the exception type, status codes, and error messages to determine
    the category of error and generate an appropriate user-facing message.

    Args:
        exception: The exception raised by the completion provider

    Returns:
        Tuple of (ErrorCategory, user_friendly_message)
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="quota"):
        return (
            ErrorCategory.SERVICE_QUOTA_EXCEEDED,
            "The AI service quota has been exceeded. Please try again later.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="rate_limit"):
        return (
            ErrorCategory.RATE_LIMIT_EXCEEDED,
            "Too many requests. Please wait a moment and try again.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="auth"):
        return (
            ErrorCategory.AUTHENTICATION_FAILED,
            "The assistant is not available right now. Please try again later.",
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="network"):
        return (
            ErrorCategory.NETWORK_ERROR,
            "Network error occurred. Please check your connection and try again.",
        )

    return (
        ErrorCategory.UNKNOWN,
        "Sorry, I couldn't process that request. Please try again.",
    )
