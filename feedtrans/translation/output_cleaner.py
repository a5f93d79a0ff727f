"""
Parsing of batch translation replies.

The provider is asked for a bare JSON array of strings, one per input text
and in the same order. Models still wrap the array in a markdown code fence
now and then, so the fence is stripped before parsing. Anything that is not
exactly an array of N strings is rejected with ResponseParseError.
"""

import json
import re
from typing import List

from feedtrans.core.exceptions import ResponseParseError

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*\n?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\n?\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ``` or ```json fence, if present."""
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text)
        text = _FENCE_CLOSE.sub("", text)
    return text


def parse_translation_array(text: str, expected: int) -> List[str]:
    """
    Parse a provider reply into a list of translations.

    Args:
        text: Raw reply text
        expected: Number of texts in the batch

    Returns:
        Translations, position i answering input text i

    Raises:
        ResponseParseError: If the reply is not a JSON array of exactly
            `expected` strings
    """
    payload = strip_code_fences(text or "")

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ResponseParseError(
            f"Response is not valid JSON: {e}",
            expected=expected,
            raw_response=text
        ) from e

    if not isinstance(data, list):
        raise ResponseParseError(
            f"Expected a JSON array, got {type(data).__name__}",
            expected=expected,
            raw_response=text
        )

    if len(data) != expected:
        raise ResponseParseError(
            f"Expected {expected} translations, got {len(data)}",
            expected=expected,
            received=len(data),
            raw_response=text
        )

    for index, value in enumerate(data):
        if not isinstance(value, str):
            raise ResponseParseError(
                f"Translation {index + 1} is {type(value).__name__}, not a string",
                expected=expected,
                received=len(data),
                raw_response=text
            )

    return data
