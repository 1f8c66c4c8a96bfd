"""
Helpers for reading JSON out of free-form LLM output.

Model output is untrusted text: it may be wrapped in markdown fences, carry
prose around the payload, or not be JSON at all.
"""
import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Return the body of the first fenced block, or the stripped text if there is none."""
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def parse_json_payload(text: str, expect: type = dict) -> Any:
    """
    Parse a JSON value of the expected type (dict or list) from LLM output.

    Tries the whole (fence-stripped) text first, then the outermost
    {...} or [...] span.

    Raises:
        ValueError: If no JSON value of the expected type can be found
    """
    if not text or not text.strip():
        raise ValueError("Empty LLM response")

    body = strip_code_fences(text)
    try:
        value = json.loads(body)
        if isinstance(value, expect):
            return value
    except json.JSONDecodeError:
        pass

    open_char, close_char = ("{", "}") if expect is dict else ("[", "]")
    start, end = body.find(open_char), body.rfind(close_char)
    if start != -1 and end > start:
        try:
            value = json.loads(body[start:end + 1])
            if isinstance(value, expect):
                return value
        except json.JSONDecodeError:
            pass

    logger.warning(f"Failed to parse {expect.__name__} JSON from LLM response: {text[:100]!r}")
    raise ValueError(f"LLM response is not a JSON {expect.__name__}")
