"""Conversions between naira amounts and stored kobo integers."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from config.constants import KOBO_PER_NAIRA, MONEY_PRECISION


def to_kobo(amount: Union[Decimal, int, float, str]) -> int:
    """Convert naira to integer kobo."""
    value = Decimal(str(amount)).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)
    return int(value * KOBO_PER_NAIRA)


def from_kobo(kobo: Optional[int]) -> Decimal:
    """Convert stored kobo to naira."""
    return (Decimal(kobo or 0) / KOBO_PER_NAIRA).quantize(MONEY_PRECISION)
