"""Candidate extraction from raw provider text.

Providers often wrap their JSON in markdown fences or surround it with a
sentence of commentary. ``extract_candidate`` turns accumulated raw text
into the best-guess payload substring; it does not parse or validate.
"""

import re

_FENCE_BLOCK = re.compile(r"```(?:json|JSON)?\s*\n?(.*?)(?:```|$)", re.DOTALL)


def strip_fences(text: str) -> str:
    """Return the body of the first markdown code fence, or the text itself.

    An unterminated fence (common mid-stream) yields everything after the
    opening marker.
    """
    match = _FENCE_BLOCK.search(text)
    if match:
        return match.group(1)
    return text


def extract_candidate(text: str) -> str | None:
    """Return the substring most likely to hold the JSON payload.

    Prefers an object (first ``{`` to last ``}``); falls back to an array.
    Returns None when no balanced-looking span exists yet.
    """
    if not text:
        return None

    body = strip_fences(text)

    start, end = body.find("{"), body.rfind("}")
    if start != -1 and end > start:
        return body[start : end + 1]

    start, end = body.find("["), body.rfind("]")
    if start != -1 and end > start:
        return body[start : end + 1]

    return None
