"""Tests for formatting utilities.

Tests the formatter functions used in notification messages
and wallet descriptions.
"""

from decimal import Decimal

import pytest

from utils.formatters import (
    format_naira,
    format_compact_naira,
    format_percentage,
    format_followers,
    mask_account_number,
)


class TestFormatNaira:
    """Tests for format_naira function."""

    def test_thousands_separator(self):
        assert format_naira(Decimal("1250000")) == "₦1,250,000.00"

    def test_kobo(self):
        assert format_naira(Decimal("25000.5")) == "₦25,000.50"

    def test_zero(self):
        assert format_naira(0) == "₦0.00"


class TestFormatCompactNaira:
    """Tests for format_compact_naira function."""

    @pytest.mark.parametrize("amount,expected", [
        (1_500_000, "₦1.50M"),
        (250_000, "₦250.0K"),
        (999, "₦999.00"),
    ])
    def test_compact(self, amount, expected):
        assert format_compact_naira(amount) == expected


class TestFormatFollowers:
    """Tests for format_followers function."""

    @pytest.mark.parametrize("count,expected", [
        (1_200_000, "1.2M"),
        (12_500, "12.5K"),
        (850, "850"),
    ])
    def test_followers(self, count, expected):
        assert format_followers(count) == expected


class TestMisc:
    """Percentage and account masking."""

    def test_percentage(self):
        assert format_percentage(Decimal("2.5")) == "2.5%"

    def test_mask_account_number(self):
        assert mask_account_number("0123456789") == "******6789"

    def test_mask_short_number(self):
        assert mask_account_number("1234") == "1234"
