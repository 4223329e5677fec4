"""Bank account model."""

from dataclasses import dataclass
from datetime import datetime

from utils.formatters import mask_account_number
from utils.time import parse_timestamp


@dataclass
class BankAccount:
    """Payout bank account linked to a wallet."""

    id: int
    wallet_id: int
    bank_name: str
    account_number: str
    account_name: str
    bank_code: str
    is_primary: bool
    is_verified: bool
    created_at: datetime

    @classmethod
    def from_row(cls, row) -> "BankAccount":
        """Create BankAccount from database row."""
        return cls(
            id=row["id"],
            wallet_id=row["wallet_id"],
            bank_name=row["bank_name"],
            account_number=row["account_number"],
            account_name=row["account_name"],
            bank_code=row["bank_code"],
            is_primary=bool(row["is_primary"]),
            is_verified=bool(row["is_verified"]),
            created_at=parse_timestamp(row["created_at"]),
        )

    @property
    def masked_number(self) -> str:
        return mask_account_number(self.account_number)
