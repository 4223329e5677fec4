"""Escrow payout split between developer, creator and the platform."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Union

from config.constants import MONEY_PRECISION
from core.errors import ValidationError

Number = Union[Decimal, int, float, str]


def to_money(value: Number) -> Decimal:
    """Convert to a Decimal rounded to the kobo."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class EscrowSplits:
    """How a held escrow amount is paid out on release."""

    developer_amount: Decimal
    creator_amount: Decimal
    reach_amount: Decimal

    @property
    def total(self) -> Decimal:
        return self.developer_amount + self.creator_amount + self.reach_amount

    def validate(self, amount: Number) -> None:
        """Raise if the parts do not add up to the escrowed amount."""
        if self.total != to_money(amount):
            raise ValidationError(
                f"Escrow splits amount mismatch: {self.total} != {to_money(amount)}"
            )

    def to_dict(self) -> Dict[str, str]:
        return {
            "developer_amount": str(self.developer_amount),
            "creator_amount": str(self.creator_amount),
            "reach_amount": str(self.reach_amount),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EscrowSplits":
        return cls(
            developer_amount=to_money(data.get("developer_amount", 0)),
            creator_amount=to_money(data.get("creator_amount", 0)),
            reach_amount=to_money(data.get("reach_amount", 0)),
        )


def compute_splits(
    amount: Number,
    creator_commission_percent: Number = 0,
    platform_fee_percent: Number = 0,
) -> EscrowSplits:
    """
    Split a sale amount.

    Creator and platform shares are rounded half-up to the kobo; the
    developer receives the remainder so the three parts always sum to
    the amount exactly.

    Args:
        amount: Amount paid by the buyer (naira)
        creator_commission_percent: Creator tier commission (e.g. 2.5)
        platform_fee_percent: Reach margin (e.g. 5)

    Returns:
        EscrowSplits
    """
    total = to_money(amount)
    creator_pct = Decimal(str(creator_commission_percent))
    fee_pct = Decimal(str(platform_fee_percent))

    if total <= 0:
        raise ValidationError("Escrow amount must be positive")
    if creator_pct < 0 or fee_pct < 0:
        raise ValidationError("Commission and fee percentages cannot be negative")
    if creator_pct + fee_pct > 100:
        raise ValidationError("Commission and fee cannot exceed 100% of the amount")

    creator_amount = to_money(total * creator_pct / 100)
    reach_amount = to_money(total * fee_pct / 100)
    developer_amount = total - creator_amount - reach_amount
    if developer_amount < 0:
        raise ValidationError("Developer share cannot be negative")

    splits = EscrowSplits(
        developer_amount=developer_amount,
        creator_amount=creator_amount,
        reach_amount=reach_amount,
    )
    splits.validate(total)
    return splits
