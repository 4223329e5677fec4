"""Escrow transaction repository for database operations."""

from decimal import Decimal
from typing import Optional

from core.payout import EscrowSplits
from database.connection import Database
from database.models import EscrowStatus, EscrowTransaction
from utils.money import to_kobo
from utils.time import utcnow, to_db


class EscrowRepository:
    """Repository for escrow operations."""

    def __init__(self, db: Database):
        self.db = db

    async def create(
        self,
        property_id: int,
        buyer_id: int,
        developer_id: int,
        creator_id: Optional[int],
        amount: Decimal,
        splits: EscrowSplits,
        creator_tier: int,
        creator_commission_percent: Decimal,
        payment_reference: str,
    ) -> EscrowTransaction:
        """Create a held escrow for a purchase."""
        splits.validate(amount)
        cursor = await self.db.execute(
            """
            INSERT INTO escrow_transactions
            (property_id, buyer_id, developer_id, creator_id, amount,
             developer_amount, creator_amount, reach_amount,
             creator_tier, creator_commission_percent, status, payment_reference, held_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            property_id, buyer_id, developer_id, creator_id, to_kobo(amount),
            to_kobo(splits.developer_amount), to_kobo(splits.creator_amount),
            to_kobo(splits.reach_amount), creator_tier, str(creator_commission_percent),
            EscrowStatus.HELD.value, payment_reference, to_db(utcnow()),
        )
        return await self.get_by_id(cursor.lastrowid)

    async def get_by_id(self, escrow_id: int) -> Optional[EscrowTransaction]:
        """Get escrow by ID."""
        row = await self.db.fetchrow(
            "SELECT * FROM escrow_transactions WHERE id = ?", escrow_id
        )
        if row:
            return EscrowTransaction.from_row(row)
        return None

    async def get_by_reference(self, payment_reference: str) -> Optional[EscrowTransaction]:
        """Get escrow by payment reference."""
        row = await self.db.fetchrow(
            "SELECT * FROM escrow_transactions WHERE payment_reference = ?",
            payment_reference,
        )
        if row:
            return EscrowTransaction.from_row(row)
        return None

    async def get_by_property_buyer(
        self, property_id: int, buyer_id: int
    ) -> Optional[EscrowTransaction]:
        """Get the escrow for a (property, buyer) pair."""
        row = await self.db.fetchrow(
            "SELECT * FROM escrow_transactions WHERE property_id = ? AND buyer_id = ?",
            property_id, buyer_id,
        )
        if row:
            return EscrowTransaction.from_row(row)
        return None

    async def mark_released(self, escrow_id: int) -> bool:
        """Move held -> released. Returns False if the escrow was not held."""
        cursor = await self.db.execute(
            """
            UPDATE escrow_transactions
            SET status = ?, released_at = ?
            WHERE id = ? AND status = ?
            """,
            EscrowStatus.RELEASED.value, to_db(utcnow()), escrow_id, EscrowStatus.HELD.value,
        )
        return cursor.rowcount == 1

    async def mark_refunded(self, escrow_id: int) -> bool:
        """Move held -> refunded. Returns False if the escrow was not held."""
        cursor = await self.db.execute(
            """
            UPDATE escrow_transactions
            SET status = ?, refunded_at = ?
            WHERE id = ? AND status = ?
            """,
            EscrowStatus.REFUNDED.value, to_db(utcnow()), escrow_id, EscrowStatus.HELD.value,
        )
        return cursor.rowcount == 1
