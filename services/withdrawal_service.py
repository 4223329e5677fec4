"""Withdrawal service: limit checks, fund locking and admin review."""

import logging
import secrets
from decimal import Decimal
from typing import List, Optional

from config import settings
from config.constants import (
    ACTIVITY_WITHDRAWAL_COMPLETED,
    ACTIVITY_WITHDRAWAL_REQUEST,
    ACTIVITY_WITHDRAWAL_REVERSED,
    DEFAULT_PAGE_SIZE,
    NOTIFY_WITHDRAWAL_APPROVED,
    NOTIFY_WITHDRAWAL_REJECTED,
)
from core.errors import ForbiddenError, NotFoundError, ValidationError
from database.connection import Database
from database.models import User, Withdrawal, WithdrawalStatus
from database.repositories import BankAccountRepository, WalletRepository, WithdrawalRepository
from services.notification_service import NotificationService
from utils.formatters import format_naira
from utils.time import start_of_day, start_of_month, utcnow
from utils.validators import validate_amount

logger = logging.getLogger(__name__)


def _limit(value) -> Decimal:
    return Decimal(str(value))


class WithdrawalService:
    """Service for wallet withdrawals to bank accounts."""

    def __init__(
        self,
        db: Database,
        notification_service: Optional[NotificationService] = None,
        min_amount: Optional[float] = None,
        max_per_transaction: Optional[float] = None,
        max_daily: Optional[float] = None,
        max_monthly: Optional[float] = None,
    ):
        self.db = db
        self.wallet_repo = WalletRepository(db)
        self.bank_repo = BankAccountRepository(db)
        self.withdrawal_repo = WithdrawalRepository(db)
        self.notifications = notification_service

        # 0 disables the per-transaction, daily and monthly limits
        self.min_amount = _limit(settings.withdrawal_min_amount if min_amount is None else min_amount)
        self.max_per_transaction = _limit(
            settings.withdrawal_max_per_transaction if max_per_transaction is None else max_per_transaction
        )
        self.max_daily = _limit(settings.withdrawal_max_daily if max_daily is None else max_daily)
        self.max_monthly = _limit(settings.withdrawal_max_monthly if max_monthly is None else max_monthly)

    @staticmethod
    def _generate_reference() -> str:
        return f"WD-{int(utcnow().timestamp())}-{secrets.token_hex(4).upper()}"

    async def request_withdrawal(
        self,
        user_id: int,
        amount,
        bank_account_id: int,
    ) -> Withdrawal:
        """
        Request a withdrawal to one of the user's bank accounts.

        The amount is moved from available to locked until an admin
        approves or rejects the request.

        Args:
            user_id: Wallet owner
            amount: Naira amount
            bank_account_id: Destination bank account

        Returns:
            Pending Withdrawal

        Raises:
            ValidationError: Amount outside limits or insufficient balance
            NotFoundError: Wallet or bank account missing
            ForbiddenError: Bank account belongs to another wallet
        """
        value = validate_amount(amount)
        if value is None:
            raise ValidationError("Invalid withdrawal amount")
        if value < self.min_amount:
            raise ValidationError(f"Minimum withdrawal is {format_naira(self.min_amount)}")
        if self.max_per_transaction and value > self.max_per_transaction:
            raise ValidationError(
                f"Maximum per withdrawal is {format_naira(self.max_per_transaction)}"
            )

        wallet = await self.wallet_repo.get_by_user_id(user_id)
        if not wallet:
            raise NotFoundError("Wallet")
        if not wallet.is_active:
            raise ValidationError("Wallet is inactive")
        bank_account = await self.bank_repo.get_by_id(bank_account_id)
        if not bank_account:
            raise NotFoundError("Bank account")
        if bank_account.wallet_id != wallet.id:
            raise ForbiddenError("Bank account does not belong to this wallet")

        async with self.db.transaction():
            now = utcnow()
            if self.max_daily:
                today = await self.withdrawal_repo.total_since(user_id, start_of_day(now))
                if today + value > self.max_daily:
                    raise ValidationError(
                        f"Daily withdrawal limit of {format_naira(self.max_daily)} exceeded"
                    )
            if self.max_monthly:
                month = await self.withdrawal_repo.total_since(user_id, start_of_month(now))
                if month + value > self.max_monthly:
                    raise ValidationError(
                        f"Monthly withdrawal limit of {format_naira(self.max_monthly)} exceeded"
                    )

            updated = await self.wallet_repo.adjust(
                wallet.id, available_delta=-value, locked_delta=value
            )
            reference = self._generate_reference()
            await self.wallet_repo.log_activity(
                updated, ACTIVITY_WITHDRAWAL_REQUEST, "available", value,
                previous_balance=updated.available_balance + value,
                new_balance=updated.available_balance,
                reference=reference,
                description=f"Withdrawal to {bank_account.bank_name} {bank_account.masked_number}",
            )
            withdrawal = await self.withdrawal_repo.create(
                user_id, wallet.id, bank_account.id, value, reference,
            )

        logger.info(f"Withdrawal {withdrawal.reference} requested: {format_naira(value)} by user {user_id}")
        return withdrawal

    async def _review(self, withdrawal_id: int, admin: User) -> Withdrawal:
        if not admin.is_admin:
            raise ForbiddenError("Only admins can review withdrawals")
        withdrawal = await self.withdrawal_repo.get_by_id(withdrawal_id)
        if not withdrawal:
            raise NotFoundError("Withdrawal")
        return withdrawal

    async def approve_withdrawal(self, withdrawal_id: int, admin: User) -> Withdrawal:
        """Mark a pending withdrawal paid out and release its locked funds."""
        withdrawal = await self._review(withdrawal_id, admin)

        async with self.db.transaction():
            if not await self.withdrawal_repo.finish(withdrawal.id, WithdrawalStatus.COMPLETED, admin.id):
                raise ValidationError(f"Withdrawal is already {withdrawal.status.value}")
            updated = await self.wallet_repo.adjust(withdrawal.wallet_id, locked_delta=-withdrawal.amount)
            await self.wallet_repo.log_activity(
                updated, ACTIVITY_WITHDRAWAL_COMPLETED, "locked", withdrawal.amount,
                previous_balance=updated.locked_balance + withdrawal.amount,
                new_balance=updated.locked_balance,
                reference=withdrawal.reference,
            )

        logger.info(f"Withdrawal {withdrawal.reference} approved by admin {admin.id}")
        if self.notifications:
            await self.notifications.notify(
                withdrawal.user_id, NOTIFY_WITHDRAWAL_APPROVED, "Withdrawal approved",
                f"Your withdrawal of {format_naira(withdrawal.amount)} ({withdrawal.reference}) has been paid.",
                {"withdrawal_id": withdrawal.id},
            )
        return await self.withdrawal_repo.get_by_id(withdrawal.id)

    async def reject_withdrawal(
        self, withdrawal_id: int, admin: User, reason: Optional[str] = None
    ) -> Withdrawal:
        """Reject a pending withdrawal and return its funds to available."""
        withdrawal = await self._review(withdrawal_id, admin)

        async with self.db.transaction():
            if not await self.withdrawal_repo.finish(
                withdrawal.id, WithdrawalStatus.REJECTED, admin.id, reason
            ):
                raise ValidationError(f"Withdrawal is already {withdrawal.status.value}")
            updated = await self.wallet_repo.adjust(
                withdrawal.wallet_id,
                available_delta=withdrawal.amount,
                locked_delta=-withdrawal.amount,
            )
            await self.wallet_repo.log_activity(
                updated, ACTIVITY_WITHDRAWAL_REVERSED, "available", withdrawal.amount,
                previous_balance=updated.available_balance - withdrawal.amount,
                new_balance=updated.available_balance,
                reference=withdrawal.reference,
                description=reason,
            )

        logger.info(f"Withdrawal {withdrawal.reference} rejected by admin {admin.id}: {reason}")
        if self.notifications:
            await self.notifications.notify(
                withdrawal.user_id, NOTIFY_WITHDRAWAL_REJECTED, "Withdrawal rejected",
                f"Your withdrawal of {format_naira(withdrawal.amount)} was rejected"
                + (f": {reason}" if reason else ".") + " The funds are back in your wallet.",
                {"withdrawal_id": withdrawal.id},
            )
        return await self.withdrawal_repo.get_by_id(withdrawal.id)

    async def list_pending(self, admin: User, limit: int = DEFAULT_PAGE_SIZE) -> List[Withdrawal]:
        """Pending withdrawals for admin review, oldest first."""
        if not admin.is_admin:
            raise ForbiddenError("Only admins can review withdrawals")
        return await self.withdrawal_repo.get_pending(limit)

    async def list_withdrawals(self, user_id: int, limit: int = DEFAULT_PAGE_SIZE) -> List[Withdrawal]:
        return await self.withdrawal_repo.get_user_withdrawals(user_id, limit)
