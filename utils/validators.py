"""Input validation utilities."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from config.constants import MONEY_PRECISION


def validate_amount(
    value: Union[str, int, float, Decimal],
    min_val: Union[int, float, Decimal] = Decimal("0.01"),
    max_val: Optional[Union[int, float, Decimal]] = None,
) -> Optional[Decimal]:
    """
    Validate and sanitize amount input.

    Args:
        value: Input amount (text or number)
        min_val: Minimum allowed value
        max_val: Maximum allowed value (None = unbounded)

    Returns:
        Validated amount rounded to the kobo, or None if invalid
    """
    try:
        # Use Decimal for precision
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None

    if not amount.is_finite():
        return None
    if amount < Decimal(str(min_val)):
        return None
    if max_val is not None and amount > Decimal(str(max_val)):
        return None

    return amount.quantize(MONEY_PRECISION)


def validate_account_number(account_number: str) -> bool:
    """Check a Nigerian NUBAN account number (10 digits)."""
    return bool(re.fullmatch(r"\d{10}", (account_number or "").strip()))


def validate_bank_code(bank_code: str) -> bool:
    """Check a CBN bank code (3 to 6 digits)."""
    return bool(re.fullmatch(r"\d{3,6}", (bank_code or "").strip()))


def validate_phone(phone: str) -> Optional[str]:
    """
    Normalize a Nigerian phone number to 234XXXXXXXXXX.

    Accepts 0803..., +234803..., 234803...

    Returns:
        Normalized number or None if invalid
    """
    digits = re.sub(r"[\s\-()+]", "", phone or "")
    if not digits.isdigit():
        return None
    if digits.startswith("0") and len(digits) == 11:
        digits = "234" + digits[1:]
    if digits.startswith("234") and len(digits) == 13:
        return digits
    return None
