"""Wallet and wallet activity models."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from utils.money import from_kobo
from utils.time import parse_timestamp


@dataclass
class Wallet:
    """Naira wallet data model."""

    id: int
    user_id: int
    user_type: str
    available_balance: Decimal
    locked_balance: Decimal
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row) -> "Wallet":
        """Create Wallet from database row."""
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            user_type=row["user_type"],
            available_balance=from_kobo(row["available_balance"]),
            locked_balance=from_kobo(row["locked_balance"]),
            is_active=bool(row["is_active"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )

    @property
    def total_balance(self) -> Decimal:
        return self.available_balance + self.locked_balance


@dataclass
class WalletActivity:
    """Ledger entry for one balance movement."""

    id: int
    wallet_id: int
    user_id: int
    action: str
    balance_type: str  # available | locked
    amount: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    reference: Optional[str]
    description: Optional[str]
    created_at: datetime

    @classmethod
    def from_row(cls, row) -> "WalletActivity":
        """Create WalletActivity from database row."""
        return cls(
            id=row["id"],
            wallet_id=row["wallet_id"],
            user_id=row["user_id"],
            action=row["action"],
            balance_type=row["balance_type"],
            amount=from_kobo(row["amount"]),
            previous_balance=from_kobo(row["previous_balance"]),
            new_balance=from_kobo(row["new_balance"]),
            reference=row["reference"],
            description=row["description"],
            created_at=parse_timestamp(row["created_at"]),
        )
