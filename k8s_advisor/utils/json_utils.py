"""
Helpers for reading structured JSON out of free-form model text.

Model responses may wrap JSON in markdown fences, prefix it with a sentence
that itself contains brackets, or trail it with commentary. Decoding goes
through langchain-core's ``parse_json_markdown`` with a strict ``json.loads``
parser, so invalid JSON (comments, trailing commas, truncated output) is
reported, never repaired.
"""

import json
from typing import Any, Iterator, Optional, Tuple

from langchain_core.utils.json import parse_json_markdown

from k8s_advisor.utils.exceptions import JSONExtractionError

_OPENERS = {"{": "}", "[": "]"}


def _parse(text: str) -> Any:
    return parse_json_markdown(text, parser=json.loads)


def _balanced_end(text: str, start: int) -> Optional[int]:
    """Index of the bracket closing the one at ``start``, ignoring brackets inside strings."""
    stack = []
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _OPENERS:
            stack.append(_OPENERS[char])
        elif char in ("}", "]"):
            if not stack or stack.pop() != char:
                return None
            if not stack:
                return index
    return None


def _bracketed_spans(text: str) -> Iterator[Tuple[int, int]]:
    """
    Top-level bracketed spans in order of appearance.

    A span that fails to decode is skipped as a whole, so values nested in a
    malformed object are never returned on their own.
    """
    position = 0
    while True:
        starts = [p for p in (text.find("{", position), text.find("[", position)) if p != -1]
        if not starts:
            return
        start = min(starts)
        end = _balanced_end(text, start)
        if end is None:
            return
        yield start, end
        position = end + 1


def _extract(text: str, expected: Tuple[type, ...]) -> Any:
    if not isinstance(text, str) or not text.strip():
        raise JSONExtractionError("Empty response - no JSON content to parse")

    try:
        value = _parse(text)
        if isinstance(value, expected):
            return value
    except ValueError:
        pass

    last_error: Optional[Exception] = None
    found = None
    for start, end in _bracketed_spans(text):
        try:
            value = _parse(text[start:end + 1])
        except ValueError as e:
            last_error = e
            continue
        if isinstance(value, expected):
            return value
        found = found if found is not None else value

    if found is not None:
        raise JSONExtractionError(f"Expected a JSON object but found {type(found).__name__}")
    if last_error is not None:
        raise JSONExtractionError(f"Invalid JSON in response: {last_error}") from last_error
    raise JSONExtractionError("No JSON object or array found in response")


def extract_json_from_ai_response(text: str) -> Any:
    """
    Extract the first well-formed JSON object or array from model output.

    Args:
        text: Raw response content

    Returns:
        The decoded JSON value (dict or list)

    Raises:
        JSONExtractionError: If the text holds no decodable JSON value
    """
    return _extract(text, (dict, list))


def extract_json_object(text: str) -> dict:
    """Like extract_json_from_ai_response, but arrays are skipped in favor of the first object."""
    return _extract(text, (dict,))
