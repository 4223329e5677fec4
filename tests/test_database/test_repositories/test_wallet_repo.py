"""Tests for WalletRepository."""

from decimal import Decimal

import pytest

from core.errors import ValidationError
from database.repositories import WalletRepository


class TestWalletRepository:
    """Test suite for WalletRepository."""

    @pytest.mark.asyncio
    async def test_get_or_create(self, wallet_repo: WalletRepository, developer):
        first = await wallet_repo.get_or_create(developer.id, "developer")
        second = await wallet_repo.get_or_create(developer.id, "developer")

        assert first.id == second.id
        assert first.available_balance == Decimal("0.00")
        assert first.locked_balance == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_adjust(self, wallet_repo: WalletRepository, developer):
        wallet = await wallet_repo.create(developer.id, "developer")

        wallet = await wallet_repo.adjust(wallet.id, available_delta=Decimal("100.50"))
        wallet = await wallet_repo.adjust(wallet.id, available_delta=Decimal("-40.25"), locked_delta=Decimal("40.25"))

        assert wallet.available_balance == Decimal("60.25")
        assert wallet.locked_balance == Decimal("40.25")
        assert wallet.total_balance == Decimal("100.50")

    @pytest.mark.asyncio
    async def test_adjust_never_goes_negative(self, wallet_repo: WalletRepository, developer):
        wallet = await wallet_repo.create(developer.id, "developer")
        await wallet_repo.adjust(wallet.id, available_delta=Decimal("10"))

        with pytest.raises(ValidationError, match="Insufficient"):
            await wallet_repo.adjust(wallet.id, available_delta=Decimal("-10.01"))
        with pytest.raises(ValidationError):
            await wallet_repo.adjust(wallet.id, locked_delta=Decimal("-1"))

        assert (await wallet_repo.get_by_id(wallet.id)).available_balance == Decimal("10.00")

    @pytest.mark.asyncio
    async def test_activity(self, wallet_repo: WalletRepository, developer):
        wallet = await wallet_repo.create(developer.id, "developer")
        updated = await wallet_repo.adjust(wallet.id, available_delta=Decimal("5"))
        await wallet_repo.log_activity(
            updated, "credit", "available", Decimal("5"), Decimal("0"), Decimal("5"), "ref-1", "test",
        )

        activity = await wallet_repo.get_activity(wallet.id)

        assert len(activity) == 1
        assert activity[0].amount == Decimal("5.00")
        assert activity[0].new_balance == Decimal("5.00")
        assert await wallet_repo.count_activity(wallet.id, "credit") == 1
        assert await wallet_repo.count_activity(wallet.id, "escrow_release") == 0
