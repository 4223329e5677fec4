"""Tests for the creator tier classifier.

Covers the threshold table, top-down evaluation, invalid input handling,
the multi-platform fold and the engagement rate helper.
"""

import math
from decimal import Decimal
from itertools import product
from types import SimpleNamespace

import pytest

from core.tiers import (
    CreatorMetrics,
    TierResult,
    classify,
    classify_best,
    engagement_rate,
    tier_result_for,
)


def metrics(followers, engagement, quality, platform=None) -> CreatorMetrics:
    return CreatorMetrics(followers=followers, engagement_rate=engagement, quality_score=quality, platform=platform)


class TestClassifyExamples:
    """Known classifications."""

    def test_elite_creator(self):
        """150k followers, 3.5% engagement, 90 quality is tier 1."""
        result = classify(metrics(150_000, 3.5, 90))

        assert result.tier == 1
        assert result.commission_percent == Decimal("3.0")
        assert result.qualified is True
        assert result.label == "Elite"

    def test_professional_creator(self):
        """75k followers, 2.5% engagement, 72 quality is tier 2."""
        result = classify(metrics(75_000, 2.5, 72))

        assert result.tier == 2
        assert result.commission_percent == Decimal("2.5")
        assert result.qualified is True

    def test_rising_creator(self):
        result = classify(metrics(20_000, 1.7, 65))

        assert result.tier == 3
        assert result.commission_percent == Decimal("2.0")

    def test_micro_creator(self):
        result = classify(metrics(7_500, 4.0, 55))

        assert result.tier == 4
        assert result.commission_percent == Decimal("1.5")

    def test_low_followers_dominates(self):
        """3k followers never qualifies, even with great engagement and quality."""
        result = classify(metrics(3_000, 5.0, 99))

        assert result == TierResult.unqualified()
        assert result.tier == 0
        assert result.commission_percent == 0
        assert result.qualified is False

    def test_to_dict(self):
        assert classify(metrics(150_000, 3.5, 90)).to_dict() == {
            "tier": 1,
            "commission": 3.0,
            "qualified": True,
            "label": "Elite",
        }


class TestClassifyBoundaries:
    """Inclusive lower bounds, exclusive upper bounds."""

    def test_tier1_follower_floor_inclusive(self):
        assert classify(metrics(100_000, 3.0, 85)).tier == 1

    def test_tier2_upper_engagement_exclusive(self):
        """Engagement of exactly 3.0 is outside tier 2's range."""
        assert classify(metrics(75_000, 3.0, 90)).tier == 0

    def test_tier4_follower_floor_inclusive(self):
        assert classify(metrics(5_000, 1.0, 50)).tier == 4

    def test_just_below_tier4_floor(self):
        assert classify(metrics(4_999, 10.0, 100)).tier == 0

    def test_quality_below_floor(self):
        assert classify(metrics(150_000, 3.5, 84.9)).tier == 0

    def test_mid_range_followers_high_engagement_not_qualified(self):
        """Tier 3 caps engagement below 2.0; tier 4 caps followers below 10k."""
        assert classify(metrics(20_000, 5.0, 90)).tier == 0


class TestClassifyInvalidInput:
    """Invalid input degrades to unqualified and never raises."""

    @pytest.mark.parametrize("followers", [None, 0, -10, math.nan, math.inf, "many", True])
    def test_invalid_followers(self, followers):
        assert classify(metrics(followers, 3.5, 90)).qualified is False

    @pytest.mark.parametrize("engagement", [None, -1.0, math.nan])
    def test_invalid_engagement(self, engagement):
        assert classify(metrics(150_000, engagement, 90)).tier == 0

    @pytest.mark.parametrize("quality", [None, -5, math.nan])
    def test_invalid_quality(self, quality):
        assert classify(metrics(150_000, 3.5, quality)).tier == 0


class TestClassifyProperties:
    """Properties over a grid of inputs."""

    FOLLOWERS = [0, 1, 4_999, 5_000, 9_999, 10_000, 49_999, 50_000, 99_999, 100_000, 1_000_000]
    ENGAGEMENT = [0.0, 0.99, 1.0, 1.49, 1.5, 1.99, 2.0, 2.99, 3.0, 12.0]
    QUALITY = [0, 49.9, 50, 60, 70, 85, 100]

    def test_under_5000_followers_always_tier_0(self):
        for followers, engagement, quality in product([0, 1, 2_500, 4_999], self.ENGAGEMENT, self.QUALITY):
            assert classify(metrics(followers, engagement, quality)).tier == 0

    def test_exactly_one_tier_and_consistent_commission(self):
        expected = {0: Decimal("0"), 1: Decimal("3.0"), 2: Decimal("2.5"), 3: Decimal("2.0"), 4: Decimal("1.5")}
        for followers, engagement, quality in product(self.FOLLOWERS, self.ENGAGEMENT, self.QUALITY):
            result = classify(metrics(followers, engagement, quality))
            assert result.tier in expected
            assert result.commission_percent == expected[result.tier]
            assert result.qualified is (result.tier > 0)


class TestClassifyBest:
    """Tests for the multi-platform fold."""

    def test_best_tier_wins(self):
        """A tier-3 and a tier-1 platform give the tier-1 result."""
        result = classify_best([
            metrics(20_000, 1.7, 65, "tiktok"),
            metrics(150_000, 3.5, 90, "instagram"),
        ])

        assert result.tier == 1
        assert result.commission_percent == Decimal("3.0")

    def test_order_does_not_matter(self):
        a = metrics(150_000, 3.5, 90)
        b = metrics(7_500, 4.0, 55)
        assert classify_best([a, b]) == classify_best([b, a])

    def test_unqualified_platforms_ignored(self):
        result = classify_best([metrics(1_000, 2.0, 80), metrics(7_500, 4.0, 55)])
        assert result.tier == 4

    def test_none_qualified(self):
        assert classify_best([metrics(1_000, 2.0, 80), metrics(None, None, None)]).qualified is False

    def test_empty(self):
        assert classify_best([]) == TierResult.unqualified()


class TestEngagementRate:
    """Tests for the engagement rate helper."""

    def test_basic(self):
        assert engagement_rate(10_000, 250, 50) == pytest.approx(3.0)

    @pytest.mark.parametrize("followers", [0, -1, None, math.nan])
    def test_zero_when_no_followers(self, followers):
        rate = engagement_rate(followers, 500, 20)
        assert rate == 0
        assert math.isfinite(rate)

    def test_metrics_from_analytics(self):
        analytics = SimpleNamespace(
            platform="instagram", followers=150_000, avg_likes=4_500, avg_comments=750, quality_score=90,
        )
        m = CreatorMetrics.from_analytics(analytics)

        assert m.engagement_rate == pytest.approx(3.5)
        assert classify(m).tier == 1


class TestTierResultFor:
    """Rebuilding results from a stored tier."""

    def test_stored_tier(self):
        result = tier_result_for(2)
        assert result.tier == 2
        assert result.commission_percent == Decimal("2.5")
        assert result.qualified is True

    @pytest.mark.parametrize("tier", [None, 0, 7])
    def test_unqualified(self, tier):
        assert tier_result_for(tier) == TierResult.unqualified()
