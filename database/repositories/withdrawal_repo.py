"""Withdrawal repository for database operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from database.connection import Database
from database.models import Withdrawal, WithdrawalStatus
from utils.money import from_kobo, to_kobo
from utils.time import utcnow, to_db


class WithdrawalRepository:
    """Repository for withdrawal operations."""

    def __init__(self, db: Database):
        self.db = db

    async def create(
        self,
        user_id: int,
        wallet_id: int,
        bank_account_id: int,
        amount: Decimal,
        reference: str,
    ) -> Withdrawal:
        """Create a pending withdrawal."""
        cursor = await self.db.execute(
            """
            INSERT INTO withdrawals
            (user_id, wallet_id, bank_account_id, amount, reference, status, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            user_id, wallet_id, bank_account_id, to_kobo(amount), reference,
            WithdrawalStatus.PENDING.value, to_db(utcnow()),
        )
        return await self.get_by_id(cursor.lastrowid)

    async def get_by_id(self, withdrawal_id: int) -> Optional[Withdrawal]:
        """Get withdrawal by ID."""
        row = await self.db.fetchrow("SELECT * FROM withdrawals WHERE id = ?", withdrawal_id)
        if row:
            return Withdrawal.from_row(row)
        return None

    async def get_user_withdrawals(self, user_id: int, limit: int = 20) -> List[Withdrawal]:
        """Withdrawals for a user, newest first."""
        rows = await self.db.fetch(
            "SELECT * FROM withdrawals WHERE user_id = ? ORDER BY id DESC LIMIT ?",
            user_id, limit,
        )
        return [Withdrawal.from_row(row) for row in rows]

    async def get_pending(self, limit: int = 50) -> List[Withdrawal]:
        """Pending withdrawals awaiting review, oldest first."""
        rows = await self.db.fetch(
            "SELECT * FROM withdrawals WHERE status = ? ORDER BY id LIMIT ?",
            WithdrawalStatus.PENDING.value, limit,
        )
        return [Withdrawal.from_row(row) for row in rows]

    async def total_since(self, user_id: int, since: datetime) -> Decimal:
        """Sum of pending and completed withdrawals created since a time."""
        total = await self.db.fetchval(
            """
            SELECT COALESCE(SUM(amount), 0) FROM withdrawals
            WHERE user_id = ? AND status IN (?, ?) AND created_at >= ?
            """,
            user_id, WithdrawalStatus.PENDING.value, WithdrawalStatus.COMPLETED.value,
            to_db(since),
        )
        return from_kobo(total)

    async def finish(
        self,
        withdrawal_id: int,
        status: WithdrawalStatus,
        reviewed_by: int,
        reason: Optional[str] = None,
    ) -> bool:
        """Move pending -> completed/rejected. Returns False if no longer pending."""
        cursor = await self.db.execute(
            """
            UPDATE withdrawals
            SET status = ?, reviewed_by = ?, reason = ?, processed_at = ?
            WHERE id = ? AND status = ?
            """,
            WithdrawalStatus(status).value, reviewed_by, reason, to_db(utcnow()),
            withdrawal_id, WithdrawalStatus.PENDING.value,
        )
        return cursor.rowcount == 1
