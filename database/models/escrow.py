"""Escrow transaction model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from core.payout import EscrowSplits
from utils.money import from_kobo
from utils.time import parse_timestamp


class EscrowStatus(str, Enum):
    """Escrow status."""
    HELD = "held"
    RELEASED = "released"
    REFUNDED = "refunded"


@dataclass
class EscrowTransaction:
    """Funds held for one (property, buyer) purchase."""

    id: int
    property_id: int
    buyer_id: int
    developer_id: int
    creator_id: Optional[int]
    amount: Decimal
    developer_amount: Decimal
    creator_amount: Decimal
    reach_amount: Decimal
    creator_tier: int  # tier frozen at payment time
    creator_commission_percent: Decimal
    status: EscrowStatus
    payment_reference: str
    held_at: datetime
    released_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "EscrowTransaction":
        """Create EscrowTransaction from database row."""
        return cls(
            id=row["id"],
            property_id=row["property_id"],
            buyer_id=row["buyer_id"],
            developer_id=row["developer_id"],
            creator_id=row["creator_id"],
            amount=from_kobo(row["amount"]),
            developer_amount=from_kobo(row["developer_amount"]),
            creator_amount=from_kobo(row["creator_amount"]),
            reach_amount=from_kobo(row["reach_amount"]),
            creator_tier=row["creator_tier"],
            creator_commission_percent=Decimal(row["creator_commission_percent"]),
            status=EscrowStatus(row["status"]),
            payment_reference=row["payment_reference"],
            held_at=parse_timestamp(row["held_at"]),
            released_at=parse_timestamp(row["released_at"]),
            refunded_at=parse_timestamp(row["refunded_at"]),
        )

    @property
    def splits(self) -> EscrowSplits:
        return EscrowSplits(
            developer_amount=self.developer_amount,
            creator_amount=self.creator_amount,
            reach_amount=self.reach_amount,
        )

    @property
    def is_held(self) -> bool:
        return self.status == EscrowStatus.HELD
