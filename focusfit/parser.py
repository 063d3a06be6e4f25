"""
Extraction of JSON objects from free-form model output.

Models often wrap the requested JSON in prose or Markdown fences. The parser
finds the first balanced top-level object and deserializes it. It does not
check which fields are present; that is the normalizer's job.
"""

import json
from typing import Any, Dict, Optional

from focusfit.errors import MalformedResponse


def _find_balanced_object(text: str) -> Optional[str]:
    """
    Return the substring from the first '{' to its matching '}'.

    Braces inside JSON string literals are ignored. Returns None when the text
    has no '{' or the first object is never closed.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
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
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]

    return None


def extract_json_object(text: str) -> str:
    """
    Locate the JSON object text inside a model response.

    Args:
        text: Raw model output

    Returns:
        The candidate JSON object substring

    Raises:
        MalformedResponse: If no object can be located
    """
    if not text or not text.strip():
        raise MalformedResponse("Model response was empty")

    candidate = _find_balanced_object(text)
    if candidate is not None:
        return candidate

    # Whole-string fallback for responses a strict parser accepts as-is
    stripped = text.strip()
    try:
        json.loads(stripped)
    except (ValueError, RecursionError) as e:
        raise MalformedResponse(f"No JSON object found in model response: {e}") from e
    return stripped


def parse_response(text: str) -> Dict[str, Any]:
    """
    Deserialize the first JSON object in a model response.

    Args:
        text: Raw model output

    Returns:
        The deserialized object

    Raises:
        MalformedResponse: If no object is found, it fails to parse, or the
            parsed value is not a JSON object
    """
    candidate = extract_json_object(text)

    try:
        data = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        # ValueError also covers integer literals past the digit limit
        raise MalformedResponse(f"Model response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponse(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    return data
