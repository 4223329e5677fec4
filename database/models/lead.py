"""Lead model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from utils.time import parse_timestamp


@dataclass
class Lead:
    """A buyer's interest in a property, optionally attributed to a creator."""

    id: int
    property_id: int
    buyer_id: int
    creator_id: Optional[int]
    tracking_code: Optional[str]
    created_at: datetime

    @classmethod
    def from_row(cls, row) -> "Lead":
        """Create Lead from database row."""
        return cls(
            id=row["id"],
            property_id=row["property_id"],
            buyer_id=row["buyer_id"],
            creator_id=row["creator_id"],
            tracking_code=row["tracking_code"],
            created_at=parse_timestamp(row["created_at"]),
        )
