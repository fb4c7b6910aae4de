"""Isolate the structured payload embedded in a free-text completion."""


def extract_payload(completion: str) -> str:
    """Return the span from the first ``{`` to the last ``}`` of ``completion``.

    This is a best-effort heuristic, not a balanced-brace parser. Prose that
    itself contains braces before or after the payload will be swept into the
    span and fail later at the parse step. Completions with no opening brace,
    or no closing brace after it, are returned unchanged.

    Never raises.
    """
    start = completion.find("{")
    end = completion.rfind("}")
    if start == -1 or end < start:
        return completion
    return completion[start : end + 1]
