from __future__ import annotations

from urllib.parse import urlparse

from .errors import InvalidURL
from .models import AnalysisRequest


def _normalize_url(raw: str) -> str:
    value = (raw or "").strip()
    if not value:
        raise InvalidURL("Please provide a URL.")

    if not value.startswith("http://") and not value.startswith("https://"):
        value = "https://" + value

    if "." not in value:
        raise InvalidURL("Please enter a valid URL (e.g., amazon.com/product...)")
    return value


def build_request(raw: str) -> AnalysisRequest:
    """Turn user input into the canonical request handed to the engine."""
    url = _normalize_url(raw)

    try:
        hostname = urlparse(url).hostname
    except ValueError as e:
        raise InvalidURL(f"Could not parse URL: {e}") from e
    if not hostname:
        raise InvalidURL("Please enter a valid website domain.")

    return AnalysisRequest(url=url, hostname=hostname)
