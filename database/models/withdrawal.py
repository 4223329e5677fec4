"""Withdrawal model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from utils.money import from_kobo
from utils.time import parse_timestamp


class WithdrawalStatus(str, Enum):
    """Withdrawal status."""
    PENDING = "pending"
    COMPLETED = "completed"
    REJECTED = "rejected"


@dataclass
class Withdrawal:
    """Withdrawal data model."""

    id: int
    user_id: int
    wallet_id: int
    bank_account_id: int
    amount: Decimal
    reference: str
    status: WithdrawalStatus
    reason: Optional[str]
    reviewed_by: Optional[int]
    created_at: datetime
    processed_at: Optional[datetime]

    @classmethod
    def from_row(cls, row) -> "Withdrawal":
        """Create Withdrawal from database row."""
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            wallet_id=row["wallet_id"],
            bank_account_id=row["bank_account_id"],
            amount=from_kobo(row["amount"]),
            reference=row["reference"],
            status=WithdrawalStatus(row["status"]),
            reason=row["reason"],
            reviewed_by=row["reviewed_by"],
            created_at=parse_timestamp(row["created_at"]),
            processed_at=parse_timestamp(row["processed_at"]),
        )

    @property
    def is_pending(self) -> bool:
        return self.status == WithdrawalStatus.PENDING
