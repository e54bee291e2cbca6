"""Helpers for parsing JSON emitted by language models."""

import json
import re
from typing import Any, Dict

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class ModelOutputError(ValueError):
    """Model output was not a JSON object."""


def strip_code_fences(content: str) -> str:
    """Return the body of the first fenced block, or the trimmed content."""
    match = _CODE_FENCE.search(content)
    if match:
        return match.group(1).strip()
    return content.strip()


def parse_model_json(content: str) -> Dict[str, Any]:
    """Parse model text into a dict.

    Raises:
        ModelOutputError: If the text is empty, not JSON, or not an object
    """
    if not content or not content.strip():
        raise ModelOutputError("Empty model output")

    body = strip_code_fences(content)
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        # Grounded answers sometimes wrap the object in prose
        start, end = body.find("{"), body.rfind("}")
        if start == -1 or end <= start:
            raise ModelOutputError(f"Model output is not JSON: {body[:120]!r}")
        try:
            parsed = json.loads(body[start:end + 1])
        except json.JSONDecodeError as e:
            raise ModelOutputError(f"Model output is not JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ModelOutputError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed
