"""
Tolerant JSON extraction for free-form model replies.

Gemini is asked for JSON but regularly wraps it in prose or markdown
fences. `parse_model_json` tries, in order:

1. a strict parse of the trimmed reply (fences removed),
2. every balanced `{...}` span in the reply, largest first,
3. the greedy span from the first `{` to the last `}`.

What happens when all of them fail is decided by the caller through
`on_parse_failure`: meal plans raise, ingredient lists degrade to empty.
"""
import json
import re
from enum import Enum
from typing import Any, Dict, List, Optional


class ParseFailurePolicy(str, Enum):
    RAISE = "throw"
    EMPTY_RESULT = "emptyResult"


class InvalidAIResponseError(ValueError):
    """The model reply did not contain a usable JSON object."""

    def __init__(self, message: str = "Invalid AI response format", raw: str = ""):
        super().__init__(message)
        self.raw = raw


_FENCE_RE = re.compile(r"^```(?:json)?\s*|```\s*$", flags=re.MULTILINE)
_GREEDY_OBJECT_RE = re.compile(r"\{.*\}", flags=re.DOTALL)


def strip_code_fences(text: str) -> str:
    text = (text or "").strip()
    if text.startswith("```"):
        text = _FENCE_RE.sub("", text).strip()
    return text


def balanced_brace_spans(text: str) -> List[str]:
    """
    Top-level `{...}` substrings whose braces balance, ignoring braces
    inside JSON string literals. Returned largest first.
    """
    spans = []
    depth = 0
    start = -1
    in_string = False
    escaped = False

    for i, ch in enumerate(text):
        if depth > 0 and in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"' and depth > 0:
            in_string = True
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                spans.append(text[start:i + 1])

    spans.sort(key=len, reverse=True)
    return spans


def _loads_object(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(candidate)
    except (json.JSONDecodeError, TypeError):
        return None
    return value if isinstance(value, dict) else None


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Best-effort extraction; None when no strategy yields a JSON object."""
    cleaned = strip_code_fences(text)
    if not cleaned:
        return None

    parsed = _loads_object(cleaned)
    if parsed is not None:
        return parsed

    for span in balanced_brace_spans(cleaned):
        parsed = _loads_object(span)
        if parsed is not None:
            return parsed

    match = _GREEDY_OBJECT_RE.search(cleaned)
    if match:
        return _loads_object(match.group(0))
    return None


def parse_model_json(
    text: str,
    on_parse_failure: ParseFailurePolicy = ParseFailurePolicy.RAISE,
) -> Optional[Dict[str, Any]]:
    parsed = extract_json_object(text)
    if parsed is not None:
        return parsed

    if on_parse_failure == ParseFailurePolicy.RAISE:
        raise InvalidAIResponseError(
            "Invalid AI response format - no JSON found in response", raw=text or ""
        )
    return None
