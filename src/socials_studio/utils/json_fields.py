"""Lenient JSON helpers for stored fields and model responses.

Usage:
    from socials_studio.utils.json_fields import safe_json_parse, extract_json

    hooks = safe_json_parse(record["hooks"], [])
    data = extract_json(model_text)
"""

from __future__ import annotations

import json
import re
from typing import Any


def safe_json_parse(value: Any, fallback: Any) -> Any:
    """Parse a JSON text field, falling back instead of raising.

    Already-decoded values of the same type as ``fallback`` pass through.
    A value that fails to parse, or parses to a different type than
    ``fallback``, yields ``fallback``.

    Args:
        value: Stored field value (usually a JSON string).
        fallback: Value returned on failure. Its type is the expected type.

    Returns:
        The decoded value or the fallback.
    """
    if value is None:
        return fallback
    if isinstance(value, type(fallback)) and not isinstance(value, str):
        return value
    if not isinstance(value, (str, bytes)):
        return fallback
    try:
        parsed = json.loads(value)
    except (json.JSONDecodeError, ValueError):
        return fallback
    if not isinstance(parsed, type(fallback)):
        return fallback
    return parsed


def extract_json(text: str) -> Any:
    """Extract JSON from AI response text, handling fenced code blocks.

    Args:
        text: Raw model output.

    Returns:
        The decoded JSON value.

    Raises:
        ValueError: If no valid JSON is found.
    """
    text = text.strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    for match in re.findall(r"```(?:json)?\s*([\s\S]*?)```", text):
        try:
            return json.loads(match.strip())
        except json.JSONDecodeError:
            continue

    # Outermost array or object
    for opener, closer in (("[", "]"), ("{", "}")):
        start = text.find(opener)
        end = text.rfind(closer)
        if start != -1 and end > start:
            try:
                return json.loads(text[start:end + 1])
            except json.JSONDecodeError:
                continue

    raise ValueError(f"No valid JSON found in response: {text[:200]}")
