from __future__ import annotations

import json
import re
from typing import Any

from .errors import MalformedJSON

_JSON_FENCE_RE = re.compile(r"```json[ \t]*\r?\n?(.*?)(?:```|$)", re.IGNORECASE | re.DOTALL)


def _candidate(text: str) -> str:
    fence = _JSON_FENCE_RE.search(text)
    if fence:
        return fence.group(1).strip()

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start : end + 1]
    return text.strip()


def extract_payload(text: str) -> dict[str, Any]:
    """Pull the JSON object out of a free-text engine reply.

    Only textual repair happens here; field contents are left to the normalizer.
    """
    candidate = _candidate(text or "")
    try:
        payload = json.loads(candidate)
    except (json.JSONDecodeError, ValueError) as e:
        raise MalformedJSON(f"Engine reply is not valid JSON: {e}", raw_text=text) from e

    if not isinstance(payload, dict):
        raise MalformedJSON(
            f"Engine reply is JSON but not an object ({type(payload).__name__})",
            raw_text=text,
        )
    return payload
