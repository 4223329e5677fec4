"""Property listing model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from utils.money import from_kobo
from utils.time import parse_timestamp


@dataclass
class Property:
    """Property listing data model."""

    id: int
    developer_id: int
    title: str
    listing_type: str  # sale | rent | short_let
    asking_price: Decimal
    status: str  # available | sold | rented
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row) -> "Property":
        """Create Property from database row."""
        return cls(
            id=row["id"],
            developer_id=row["developer_id"],
            title=row["title"],
            listing_type=row["listing_type"],
            asking_price=from_kobo(row["asking_price"]),
            status=row["status"],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )

    @property
    def is_available(self) -> bool:
        return self.status == "available"

    @property
    def status_after_purchase(self) -> str:
        """Status a listing moves to once paid for."""
        return "sold" if self.listing_type == "sale" else "rented"
