"""Formatting utilities for notification messages."""

from decimal import Decimal
from typing import Union

Amount = Union[Decimal, float, int]


def format_naira(amount: Amount) -> str:
    """Format naira amount with thousands separators."""
    return f"₦{Decimal(str(amount)):,.2f}"


def format_compact_naira(amount: Amount) -> str:
    """Format naira amount compactly (₦1.5M, ₦250.0K)."""
    value = float(amount)
    if value >= 1_000_000:
        return f"₦{value / 1_000_000:.2f}M"
    elif value >= 1_000:
        return f"₦{value / 1_000:.1f}K"
    else:
        return f"₦{value:.2f}"


def format_percentage(value: Amount) -> str:
    """Format as percentage without sign."""
    return f"{float(value):.1f}%"


def format_followers(count: int) -> str:
    """Format follower count (12.5K, 1.2M)."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    elif count >= 1_000:
        return f"{count / 1_000:.1f}K"
    return str(count)


def mask_account_number(account_number: str) -> str:
    """Mask all but the last four digits of a bank account number."""
    if len(account_number) <= 4:
        return account_number
    return f"{'*' * (len(account_number) - 4)}{account_number[-4:]}"
