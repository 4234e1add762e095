from __future__ import annotations

from dataclasses import asdict, dataclass

from .models import NormalizedResult, ScoreTierOut


@dataclass(frozen=True)
class ScoreTier:
    low: int
    high: int
    range_label: str
    label: str
    description: str
    advice: str

    def contains(self, score: int) -> bool:
        return self.low <= score <= self.high

    def to_model(self) -> ScoreTierOut:
        return ScoreTierOut(**asdict(self))


# Highest band first; classify() returns the first match.
SCORE_TIERS: tuple[ScoreTier, ...] = (
    ScoreTier(
        95, 100, "95–100", "Excellent Trust",
        "Highest safety tier. Verified official brands and flawless seller reputation.",
        "Highly trusted! This product passes all safety checks with flying colors.",
    ),
    ScoreTier(
        90, 94, "90–94", "Safe Product",
        "Highly reliable. Standard marketplace protections and consistent positive sentiment.",
        "Safe to buy. Verified seller and authentic reviews.",
    ),
    ScoreTier(
        85, 89, "85–89", "Good (Minor Caution)",
        "Generally safe. Minor red flags like a newer seller or sparse review history.",
        "Generally safe, but check recent reviews just in case.",
    ),
    ScoreTier(
        80, 84, "80–84", "Risky (Warning)",
        "Proceed with caution. Inconsistent pricing or suspicious review phrasing detected.",
        "Proceed with caution. Some mixed signals detected.",
    ),
    ScoreTier(
        50, 79, "50–79", "High Risk",
        "Significant red flags found. Potential drop-shipping scam or review botting.",
        "Not recommended. Significant red flags found.",
    ),
    ScoreTier(
        0, 49, "0–49", "Likely Fake",
        "DANGER: High probability of a scam, phishing link, or counterfeit product.",
        "DANGER: Do not buy. High probability of being a scam.",
    ),
)


def classify(score: int) -> ScoreTier:
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError(f"score must be an integer, got {score!r}")
    for tier in SCORE_TIERS:
        if tier.contains(score):
            return tier
    raise ValueError(f"score {score} is outside 0-100")


def tier_for_result(result: NormalizedResult) -> ScoreTier:
    return classify(result.trust_score)
