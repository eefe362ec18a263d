"""Extract a structured payload from a raw model response."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterator

from .errors import ParseError
from .utils import configure_logging

configure_logging()
logger = logging.getLogger(__name__)


def extract_json_block(text: str) -> str:
    """Return the span from the first ``{`` to the last ``}``, inclusive."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ParseError("No JSON object found in model response.")
    return text[start : end + 1]


def iter_balanced_objects(text: str) -> Iterator[str]:
    """Yield each top-level brace-balanced ``{...}`` fragment in order.

    Braces inside JSON string literals are ignored. An unterminated fragment at
    the end of the text is not yielded.
    """
    depth = 0
    start = -1
    in_string = False
    escaped = False
    for idx, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"' and depth > 0:
            in_string = True
        elif char == "{":
            if depth == 0:
                start = idx
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                yield text[start : idx + 1]


def _parse_text(text: str) -> Any:
    stripped = text.strip()
    if not stripped:
        raise ParseError("Empty model response.")
    try:
        direct = json.loads(stripped)
    except (json.JSONDecodeError, RecursionError):
        direct = None
    if isinstance(direct, dict):
        return direct

    block = extract_json_block(stripped)
    try:
        return json.loads(block)
    except (json.JSONDecodeError, RecursionError) as exc:
        greedy_error = exc

    for fragment in iter_balanced_objects(stripped):
        try:
            return json.loads(fragment)
        except (json.JSONDecodeError, RecursionError):
            continue
    raise ParseError(f"Failed to parse the analysis result: {greedy_error}")


def normalize_response(raw: Any) -> Any:
    """Return the structured payload carried by ``raw``.

    Already-structured values pass through unchanged; text (or UTF-8 bytes)
    is scanned for an embedded JSON object.
    """
    if raw is None:
        raise ParseError("Empty model response.")
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Model response is not valid UTF-8: {exc}") from exc
    if not isinstance(raw, str):
        return raw
    logger.debug("Raw model response: %s", raw)
    return _parse_text(raw)
