"""Wallet repository for database operations."""

from decimal import Decimal
from typing import List, Optional

from core.errors import ValidationError
from database.connection import Database
from database.models import Wallet, WalletActivity
from utils.money import to_kobo
from utils.time import utcnow, to_db


class WalletRepository:
    """Repository for wallet operations.

    Balances only ever change through a single guarded UPDATE so concurrent
    credits and debits cannot lose updates.
    """

    def __init__(self, db: Database):
        self.db = db

    async def create(self, user_id: int, user_type: str) -> Wallet:
        """Create an empty wallet."""
        now = to_db(utcnow())
        cursor = await self.db.execute(
            """
            INSERT INTO wallets (user_id, user_type, created_at, updated_at)
            VALUES (?, ?, ?, ?)
            """,
            user_id, user_type, now, now,
        )
        return await self.get_by_id(cursor.lastrowid)

    async def get_by_id(self, wallet_id: int) -> Optional[Wallet]:
        """Get wallet by ID."""
        row = await self.db.fetchrow("SELECT * FROM wallets WHERE id = ?", wallet_id)
        if row:
            return Wallet.from_row(row)
        return None

    async def get_by_user_id(self, user_id: int) -> Optional[Wallet]:
        """Get wallet by user ID."""
        row = await self.db.fetchrow("SELECT * FROM wallets WHERE user_id = ?", user_id)
        if row:
            return Wallet.from_row(row)
        return None

    async def get_or_create(self, user_id: int, user_type: str) -> Wallet:
        """Get a user's wallet, creating it if absent."""
        await self.db.execute(
            """
            INSERT INTO wallets (user_id, user_type, created_at, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(user_id) DO NOTHING
            """,
            user_id, user_type, to_db(utcnow()), to_db(utcnow()),
        )
        return await self.get_by_user_id(user_id)

    async def adjust(
        self,
        wallet_id: int,
        available_delta: Decimal = Decimal("0"),
        locked_delta: Decimal = Decimal("0"),
    ) -> Wallet:
        """
        Atomically add deltas to the available and locked balances.

        Raises:
            ValidationError: A balance would go negative
        """
        available = to_kobo(available_delta)
        locked = to_kobo(locked_delta)
        cursor = await self.db.execute(
            """
            UPDATE wallets
            SET available_balance = available_balance + ?,
                locked_balance = locked_balance + ?,
                updated_at = ?
            WHERE id = ?
              AND available_balance + ? >= 0
              AND locked_balance + ? >= 0
            """,
            available, locked, to_db(utcnow()), wallet_id, available, locked,
        )
        if cursor.rowcount != 1:
            raise ValidationError("Insufficient balance")
        return await self.get_by_id(wallet_id)

    async def log_activity(
        self,
        wallet: Wallet,
        action: str,
        balance_type: str,
        amount: Decimal,
        previous_balance: Decimal,
        new_balance: Decimal,
        reference: Optional[str] = None,
        description: Optional[str] = None,
    ) -> WalletActivity:
        """Append a ledger entry."""
        cursor = await self.db.execute(
            """
            INSERT INTO wallet_activity
            (wallet_id, user_id, action, balance_type, amount, previous_balance,
             new_balance, reference, description, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            wallet.id, wallet.user_id, action, balance_type, to_kobo(amount),
            to_kobo(previous_balance), to_kobo(new_balance), reference, description,
            to_db(utcnow()),
        )
        row = await self.db.fetchrow("SELECT * FROM wallet_activity WHERE id = ?", cursor.lastrowid)
        return WalletActivity.from_row(row)

    async def get_activity(self, wallet_id: int, limit: int = 20) -> List[WalletActivity]:
        """Ledger entries, newest first."""
        rows = await self.db.fetch(
            "SELECT * FROM wallet_activity WHERE wallet_id = ? ORDER BY id DESC LIMIT ?",
            wallet_id, limit,
        )
        return [WalletActivity.from_row(row) for row in rows]

    async def count_activity(self, wallet_id: int, action: Optional[str] = None) -> int:
        """Number of ledger entries, optionally for one action."""
        if action is None:
            return await self.db.fetchval(
                "SELECT COUNT(*) FROM wallet_activity WHERE wallet_id = ?", wallet_id
            )
        return await self.db.fetchval(
            "SELECT COUNT(*) FROM wallet_activity WHERE wallet_id = ? AND action = ?",
            wallet_id, action,
        )
