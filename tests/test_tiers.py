import pytest

from trustlens_agent.normalizer import normalize_result
from trustlens_agent.tiers import SCORE_TIERS, classify, tier_for_result


def test_tiers_partition_zero_to_hundred():
    for score in range(0, 101):
        matching = [t for t in SCORE_TIERS if t.contains(score)]
        assert len(matching) == 1
        assert classify(score) is matching[0]


def test_tiers_are_ordered_highest_first_without_gaps():
    assert SCORE_TIERS[0].high == 100
    assert SCORE_TIERS[-1].low == 0
    for upper, lower in zip(SCORE_TIERS, SCORE_TIERS[1:]):
        assert lower.high + 1 == upper.low


@pytest.mark.parametrize(
    "score, label",
    [
        (100, "Excellent Trust"),
        (95, "Excellent Trust"),
        (94, "Safe Product"),
        (85, "Good (Minor Caution)"),
        (84, "Risky (Warning)"),
        (50, "High Risk"),
        (49, "Likely Fake"),
        (0, "Likely Fake"),
    ],
)
def test_boundaries(score, label):
    assert classify(score).label == label


@pytest.mark.parametrize("score", [-1, 101, 50.0, True, "90"])
def test_out_of_domain_scores_raise(score):
    with pytest.raises(ValueError):
        classify(score)


def test_tier_for_result():
    result = normalize_result({"trust_score": 97}, "https://amazon.com/x")
    tier = tier_for_result(result)
    assert tier.range_label == "95–100"
    assert tier.to_model().label == "Excellent Trust"
