from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Iterable
from urllib.parse import urlparse

from .models import Breakdown, NormalizedResult, Verdict
from .prompts import BREAKDOWN_KEYS

DEFAULT_SCORE = 50
DEFAULT_VERDICT: Verdict = "Suspicious"
DEFAULT_REASON = "Analysis completed with limited data."
DEFAULT_ADVICE = "Please verify this seller on other platforms before checkout."

_VERDICTS: dict[str, Verdict] = {
    "genuine": "Genuine",
    "suspicious": "Suspicious",
    "fake": "Fake",
}


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (str, int, float, bool)):
        s = str(value).strip()
        return [s] if s else []
    if isinstance(value, (list, tuple)):
        out: list[str] = []
        for item in value:
            if item is None or isinstance(item, (dict, list)):
                continue
            s = str(item).strip()
            if s:
                out.append(s)
        return out
    return []


def _score(raw: Any) -> int:
    if isinstance(raw, bool):
        return DEFAULT_SCORE
    if isinstance(raw, int):
        return max(0, min(100, raw))
    if isinstance(raw, float):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip().rstrip("%"))
        except ValueError:
            return DEFAULT_SCORE
    else:
        return DEFAULT_SCORE

    if math.isnan(value):
        return DEFAULT_SCORE
    value = max(0.0, min(100.0, value))
    # Half-up, not banker's rounding.
    return int(math.floor(value + 0.5))


def _verdict(raw: Any) -> Verdict:
    if not isinstance(raw, str):
        return DEFAULT_VERDICT
    return _VERDICTS.get(raw.strip().lower(), DEFAULT_VERDICT)


def _advice(raw: Any) -> str:
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return DEFAULT_ADVICE


def _breakdown(raw: Any) -> Breakdown:
    if not isinstance(raw, dict):
        return Breakdown()
    return Breakdown(**{key: _as_str_list(raw.get(key)) for key in BREAKDOWN_KEYS})


def citation_hostname(uri: str) -> str | None:
    try:
        host = urlparse(uri.strip()).hostname
    except (AttributeError, ValueError):
        return None
    if not host:
        return None
    return host[4:] if host.startswith("www.") else host


def _sources(citations: Iterable[str], raw: Any) -> list[str]:
    seen: list[str] = []
    for uri in citations:
        host = citation_hostname(uri)
        if host and host not in seen:
            seen.append(host)
    for item in _as_str_list(raw):
        if item not in seen:
            seen.append(item)
    return seen


def normalize_result(
    payload: Any,
    url: str,
    *,
    citations: Iterable[str] = (),
    now: datetime | None = None,
) -> NormalizedResult:
    """Coerce a loosely-typed engine payload into the strict result contract.

    Every field is defaulted on its own, so a half-filled reply still yields
    whatever signal it carries. Never raises for dict-shaped or garbage input.
    """
    data: dict[str, Any] = payload if isinstance(payload, dict) else {}

    reasons = _as_str_list(data.get("reasons")) or [DEFAULT_REASON]
    timestamp = (now or datetime.now(timezone.utc)).isoformat()

    return NormalizedResult(
        trust_score=_score(data.get("trust_score")),
        verdict=_verdict(data.get("verdict")),
        reasons=reasons,
        advice=_advice(data.get("advice")),
        nlp_insights=_as_str_list(data.get("nlp_insights")),
        breakdown=_breakdown(data.get("breakdown")),
        url=url,
        timestamp=timestamp,
        sources=_sources(citations, data.get("sources")),
    )
