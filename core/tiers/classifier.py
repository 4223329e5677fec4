"""Creator tier classifier.

Maps a creator's social reach (followers, engagement rate, quality score)
to one of four commission tiers. Tiers are evaluated top-down (Elite first)
and the first tier whose three conditions all hold wins. Invalid input is
never an error: it classifies as tier 0 (not qualified).
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional

from config.constants import CREATOR_TIERS, NOT_QUALIFIED_LABEL


@dataclass(frozen=True)
class CreatorMetrics:
    """Social metrics for one creator on one platform."""

    followers: Optional[float]
    engagement_rate: Optional[float]
    quality_score: Optional[float]
    platform: Optional[str] = None

    @classmethod
    def from_analytics(cls, analytics: Any) -> "CreatorMetrics":
        """Build metrics from a PlatformAnalytics snapshot."""
        return cls(
            followers=analytics.followers,
            engagement_rate=engagement_rate(
                analytics.followers, analytics.avg_likes, analytics.avg_comments
            ),
            quality_score=analytics.quality_score,
            platform=analytics.platform,
        )


@dataclass(frozen=True)
class TierResult:
    """Outcome of a tier classification."""

    tier: int
    commission_percent: Decimal
    qualified: bool
    label: str = NOT_QUALIFIED_LABEL

    @classmethod
    def unqualified(cls) -> "TierResult":
        return cls(tier=0, commission_percent=Decimal("0"), qualified=False)

    def to_dict(self) -> dict:
        return {
            "tier": self.tier,
            "commission": float(self.commission_percent),
            "qualified": self.qualified,
            "label": self.label,
        }


def _is_valid_number(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value) and value >= 0
    except TypeError:
        return False


def _in_range(value: float, low: Optional[float], high: Optional[float]) -> bool:
    if low is not None and value < low:
        return False
    if high is not None and value >= high:
        return False
    return True


def classify(metrics: CreatorMetrics) -> TierResult:
    """
    Classify one platform's metrics into a tier.

    Args:
        metrics: Followers, engagement rate (%) and quality score (0-100)

    Returns:
        TierResult; tier 0 when no tier matches or input is invalid
    """
    followers = metrics.followers
    engagement = metrics.engagement_rate
    quality = metrics.quality_score

    if not _is_valid_number(followers) or followers <= 0:
        return TierResult.unqualified()
    if not _is_valid_number(engagement) or not _is_valid_number(quality):
        return TierResult.unqualified()

    for tier, label, min_f, max_f, min_e, max_e, min_q, commission in CREATOR_TIERS:
        if (
            _in_range(followers, min_f, max_f)
            and _in_range(engagement, min_e, max_e)
            and quality >= min_q
        ):
            return TierResult(tier=tier, commission_percent=commission, qualified=True, label=label)

    return TierResult.unqualified()


def classify_best(platforms: Iterable[CreatorMetrics]) -> TierResult:
    """
    Classify each platform and keep the best qualified tier.

    Tier 1 is the best tier; among qualified results the smallest tier
    number wins. No qualified platform gives an unqualified result.
    """
    best: Optional[TierResult] = None
    for metrics in platforms:
        result = classify(metrics)
        if result.qualified and (best is None or result.tier < best.tier):
            best = result
    return best if best is not None else TierResult.unqualified()


def engagement_rate(followers: Any, avg_likes: Any, avg_comments: Any) -> float:
    """
    Engagement rate as a percentage: (avg_likes + avg_comments) / followers * 100.

    Returns 0.0 when followers is not positive or any input is unusable.
    """
    if not _is_valid_number(followers) or followers <= 0:
        return 0.0
    likes = avg_likes if _is_valid_number(avg_likes) else 0.0
    comments = avg_comments if _is_valid_number(avg_comments) else 0.0
    return (likes + comments) / followers * 100


def tier_result_for(tier: Optional[int]) -> TierResult:
    """Rebuild the TierResult for a stored tier number (None or 0 is not qualified)."""
    for number, label, *_, commission in CREATOR_TIERS:
        if number == tier:
            return TierResult(tier=number, commission_percent=commission, qualified=True, label=label)
    return TierResult.unqualified()
