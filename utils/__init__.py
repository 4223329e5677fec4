from .formatters import format_naira, format_compact_naira, format_followers, mask_account_number
from .validators import validate_amount, validate_account_number, validate_phone
from .money import to_kobo, from_kobo
from .time import utcnow, parse_timestamp

__all__ = [
    "format_naira",
    "format_compact_naira",
    "format_followers",
    "mask_account_number",
    "validate_amount",
    "validate_account_number",
    "validate_phone",
    "to_kobo",
    "from_kobo",
    "utcnow",
    "parse_timestamp",
]
