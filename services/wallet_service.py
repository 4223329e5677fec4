"""Wallet service: the ledger collaborator used by purchase and handover flows."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from config.constants import (
    ACTIVITY_CREDIT,
    ACTIVITY_ESCROW_RELEASE,
    ACTIVITY_PROPERTY_PURCHASE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)
from core.errors import NotFoundError, ValidationError
from core.payout import to_money
from database.connection import Database
from database.models import BankAccount, Wallet, WalletActivity
from database.repositories import BankAccountRepository, UserRepository, WalletRepository
from utils.formatters import format_naira
from utils.validators import validate_account_number, validate_bank_code

logger = logging.getLogger(__name__)


@dataclass
class WalletBalance:
    """Balance snapshot for a user."""
    available: Decimal
    locked: Decimal

    @property
    def total(self) -> Decimal:
        return self.available + self.locked


class WalletService:
    """Service for wallet balances, ledger entries and bank accounts."""

    def __init__(self, db: Database):
        self.db = db
        self.wallet_repo = WalletRepository(db)
        self.bank_repo = BankAccountRepository(db)
        self.user_repo = UserRepository(db)

    async def get_or_create_wallet(self, user_id: int) -> Wallet:
        """Get a user's wallet, creating it if absent."""
        wallet = await self.wallet_repo.get_by_user_id(user_id)
        if wallet:
            return wallet
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User")
        wallet = await self.wallet_repo.get_or_create(user_id, user.role)
        logger.info(f"Created wallet {wallet.id} for user {user_id}")
        return wallet

    @staticmethod
    def _positive(amount) -> Decimal:
        value = to_money(amount)
        if value <= 0:
            raise ValidationError("Amount must be positive")
        return value

    async def credit(
        self,
        user_id: int,
        amount: Decimal,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        action: str = ACTIVITY_CREDIT,
    ) -> Wallet:
        """
        Credit a user's available balance.

        Args:
            user_id: Wallet owner
            amount: Naira amount (> 0)
            description: Ledger description
            reference: External reference (escrow, payment)
            action: Ledger action name

        Returns:
            Updated wallet
        """
        value = self._positive(amount)
        async with self.db.transaction():
            wallet = await self.get_or_create_wallet(user_id)
            updated = await self.wallet_repo.adjust(wallet.id, available_delta=value)
            await self.wallet_repo.log_activity(
                updated, action, "available", value,
                previous_balance=updated.available_balance - value,
                new_balance=updated.available_balance,
                reference=reference,
                description=description,
            )
        logger.info(f"Credited {format_naira(value)} to user {user_id} ({action})")
        return updated

    async def hold(
        self,
        user_id: int,
        amount: Decimal,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        action: str = ACTIVITY_PROPERTY_PURCHASE,
    ) -> Wallet:
        """Add incoming escrowed funds to a user's locked balance."""
        value = self._positive(amount)
        async with self.db.transaction():
            wallet = await self.get_or_create_wallet(user_id)
            updated = await self.wallet_repo.adjust(wallet.id, locked_delta=value)
            await self.wallet_repo.log_activity(
                updated, action, "locked", value,
                previous_balance=updated.locked_balance - value,
                new_balance=updated.locked_balance,
                reference=reference,
                description=description,
            )
        logger.info(f"Locked {format_naira(value)} for user {user_id} ({action})")
        return updated

    async def release_held(
        self,
        user_id: int,
        amount: Decimal,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        action: str = ACTIVITY_ESCROW_RELEASE,
    ) -> Wallet:
        """Move previously locked funds into the available balance."""
        value = self._positive(amount)
        async with self.db.transaction():
            wallet = await self.get_or_create_wallet(user_id)
            updated = await self.wallet_repo.adjust(
                wallet.id, available_delta=value, locked_delta=-value
            )
            await self.wallet_repo.log_activity(
                updated, action, "available", value,
                previous_balance=updated.available_balance - value,
                new_balance=updated.available_balance,
                reference=reference,
                description=description,
            )
        logger.info(f"Released {format_naira(value)} to user {user_id} ({action})")
        return updated

    async def get_balance(self, user_id: int) -> WalletBalance:
        """Balance for a user; zero if they have no wallet yet."""
        wallet = await self.wallet_repo.get_by_user_id(user_id)
        if not wallet:
            return WalletBalance(available=Decimal("0.00"), locked=Decimal("0.00"))
        return WalletBalance(available=wallet.available_balance, locked=wallet.locked_balance)

    async def get_activity(self, user_id: int, limit: int = DEFAULT_PAGE_SIZE) -> List[WalletActivity]:
        """Ledger entries for a user, newest first."""
        wallet = await self.wallet_repo.get_by_user_id(user_id)
        if not wallet:
            return []
        return await self.wallet_repo.get_activity(wallet.id, min(limit, MAX_PAGE_SIZE))

    async def add_bank_account(
        self,
        user_id: int,
        bank_name: str,
        account_number: str,
        account_name: str,
        bank_code: str,
    ) -> BankAccount:
        """
        Link a payout bank account. The first account becomes primary.

        Raises:
            ValidationError: Bad NUBAN/bank code or duplicate account
        """
        account_number = (account_number or "").strip()
        if not validate_account_number(account_number):
            raise ValidationError("Account number must be 10 digits")
        if not validate_bank_code(bank_code):
            raise ValidationError("Invalid bank code")
        if not bank_name or not account_name:
            raise ValidationError("Bank name and account name are required")

        async with self.db.transaction():
            wallet = await self.get_or_create_wallet(user_id)
            if await self.bank_repo.get_by_number(wallet.id, account_number):
                raise ValidationError("Bank account already added")
            is_primary = await self.bank_repo.count_for_wallet(wallet.id) == 0
            account = await self.bank_repo.create(
                wallet.id, bank_name, account_number, account_name, bank_code.strip(), is_primary,
            )
        logger.info(f"Added bank account {account.masked_number} for user {user_id}")
        return account

    async def list_bank_accounts(self, user_id: int) -> List[BankAccount]:
        wallet = await self.wallet_repo.get_by_user_id(user_id)
        if not wallet:
            return []
        return await self.bank_repo.get_for_wallet(wallet.id)
