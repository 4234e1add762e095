from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import urlparse

from .models import AnalysisRequest, NormalizedResult
from .normalizer import normalize_result
from .tiers import classify

_WELL_KNOWN_DOMAINS = {
    "amazon.com",
    "amazon.in",
    "amazon.co.uk",
    "ebay.com",
    "walmart.com",
    "target.com",
    "bestbuy.com",
    "apple.com",
    "dell.com",
    "flipkart.com",
    "etsy.com",
    "ikea.com",
}

_SUSPICIOUS_KEYWORDS = (
    "free",
    "gift",
    "bonus",
    "cheap",
    "discount",
    "clearance",
    "replica",
    "wholesale",
    "outlet",
    "giveaway",
    "verify",
    "login",
    "secure-",
    "deal",
    "promo",
)

_RISKY_TLDS = (".xyz", ".top", ".shop", ".click", ".buzz", ".icu", ".rest", ".store")


@dataclass(frozen=True)
class FeatureSet:
    has_https: bool
    url_length: int
    suspicious_keywords: int
    subdomain_count: int
    is_ip_host: bool
    hyphen_count: int
    is_well_known: bool
    risky_tld: bool


def _registrable_domain_guess(hostname: str) -> str:
    parts = [p for p in hostname.split(".") if p]
    if len(parts) <= 2:
        return hostname
    # amazon.co.uk and friends
    if len(parts[-1]) == 2 and parts[-2] in ("co", "com", "org", "net", "ac", "gov"):
        return ".".join(parts[-3:])
    return ".".join(parts[-2:])


def _is_ip(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return True


def extract_features(request: AnalysisRequest) -> FeatureSet:
    host = request.hostname.lower()
    registrable = _registrable_domain_guess(host)
    lowered = request.url.lower()
    is_ip_host = _is_ip(host)

    subdomain_count = 0
    if not is_ip_host:
        bare = host[4:] if host.startswith("www.") else host
        subdomain_count = max(0, bare.count(".") - registrable.count("."))

    return FeatureSet(
        has_https=urlparse(request.url).scheme == "https",
        url_length=len(request.url),
        suspicious_keywords=sum(1 for kw in _SUSPICIOUS_KEYWORDS if kw in lowered),
        subdomain_count=subdomain_count,
        is_ip_host=is_ip_host,
        hyphen_count=registrable.count("-"),
        is_well_known=registrable in _WELL_KNOWN_DOMAINS,
        risky_tld=host.endswith(_RISKY_TLDS),
    )


class HeuristicEstimator:
    """URL-only trust estimate used when the reasoning engine is unavailable.

    No I/O: it always returns synchronously, and its payload goes through the
    same normalizer as engine replies.
    """

    def estimate(self, request: AnalysisRequest, *, now: datetime | None = None) -> NormalizedResult:
        f = extract_features(request)
        score = 50
        reasons: list[str] = []
        seller: list[str] = []
        description: list[str] = []

        if f.has_https:
            score += 12
            seller.append("Connection is encrypted (HTTPS).")
        else:
            score -= 10
            seller.append("Website is using HTTP; encryption may be missing.")
            reasons.append("Page is served without HTTPS.")

        if f.is_well_known:
            score += 30
            seller.append("This is a widely recognized, established marketplace.")
            reasons.append("Domain belongs to an established retailer.")
        else:
            seller.append("Seller domain is not on the list of established retailers.")

        if f.is_ip_host:
            score -= 20
            reasons.append("URL points at a raw IP address instead of a domain.")

        if f.suspicious_keywords:
            score -= min(24, 8 * f.suspicious_keywords)
            description.append(f"URL contains {f.suspicious_keywords} bait keyword(s).")
            reasons.append("URL uses promotional or bait wording.")

        if f.subdomain_count > 2:
            score -= 6
            description.append(f"Deep subdomain nesting ({f.subdomain_count} levels).")

        if f.hyphen_count >= 2:
            score -= 6
            description.append("Domain name is built from several hyphenated words.")

        if f.risky_tld and not f.is_well_known:
            score -= 8
            seller.append("Top-level domain is frequently used by throwaway storefronts.")

        if f.url_length > 120:
            score -= 5
            description.append(f"Unusually long URL ({f.url_length} characters).")

        score = max(0, min(100, score))
        if score >= 80:
            verdict = "Genuine"
        elif score >= 50:
            verdict = "Suspicious"
        else:
            verdict = "Fake"

        reasons.append("Estimated from URL signals only; live AI analysis was unavailable.")
        payload = {
            "trust_score": score,
            "verdict": verdict,
            "reasons": reasons,
            "advice": classify(score).advice,
            "nlp_insights": [],
            "breakdown": {
                "reviews": ["Reviews were not inspected in offline mode."],
                "sentiment": [],
                "price": [],
                "seller": seller,
                "description": description,
            },
        }
        return normalize_result(payload, request.url, now=now)
