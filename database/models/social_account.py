"""Creator social account and tier history models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List
import json

from utils.time import parse_timestamp


@dataclass
class SocialAccount:
    """A creator's linked social media profile."""

    id: int
    user_id: int
    platform: str
    handle: str
    created_at: datetime

    @classmethod
    def from_row(cls, row) -> "SocialAccount":
        """Create SocialAccount from database row."""
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            platform=row["platform"],
            handle=row["handle"],
            created_at=parse_timestamp(row["created_at"]),
        )


@dataclass
class CreatorTierHistory:
    """One monthly (or on-demand) tier evaluation of a creator."""

    id: int
    creator_id: int
    tier: int  # 0 = not qualified
    commission_percent: Decimal
    created_at: datetime
    analytics_data: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_row(cls, row) -> "CreatorTierHistory":
        """Create CreatorTierHistory from database row."""
        analytics = json.loads(row["analytics_data"]) if row["analytics_data"] else []
        return cls(
            id=row["id"],
            creator_id=row["creator_id"],
            tier=row["tier"],
            commission_percent=Decimal(row["commission_percent"]),
            created_at=parse_timestamp(row["created_at"]),
            analytics_data=analytics,
        )
