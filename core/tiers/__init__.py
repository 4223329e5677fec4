from .classifier import (
    CreatorMetrics,
    TierResult,
    classify,
    classify_best,
    engagement_rate,
    tier_result_for,
)

__all__ = [
    "CreatorMetrics",
    "TierResult",
    "classify",
    "classify_best",
    "engagement_rate",
    "tier_result_for",
]
