"""
Recover a JSON object from noisy model output.
"""

import json
import re


FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


def _parse(text):
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return None


def try_parse(text):
    """
    Parse structured data out of a model response.

    Strategies, in order: the whole text, the interior of the first fenced
    code block, then the span from the first "{" to the last "}". Returns
    None when all of them fail; never raises.
    """
    if not isinstance(text, str):
        return None

    parsed = _parse(text)
    if parsed is not None:
        return parsed

    fence = FENCE_RE.search(text)
    if fence:
        parsed = _parse(fence.group(1))
        if parsed is not None:
            return parsed

    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        return _parse(text[start : end + 1])
    return None
