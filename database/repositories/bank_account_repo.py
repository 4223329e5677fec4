"""Bank account repository for database operations."""

from typing import List, Optional

from database.connection import Database
from database.models import BankAccount
from utils.time import utcnow, to_db


class BankAccountRepository:
    """Repository for payout bank accounts."""

    def __init__(self, db: Database):
        self.db = db

    async def create(
        self,
        wallet_id: int,
        bank_name: str,
        account_number: str,
        account_name: str,
        bank_code: str,
        is_primary: bool = False,
    ) -> BankAccount:
        """Add a bank account to a wallet."""
        cursor = await self.db.execute(
            """
            INSERT INTO bank_accounts
            (wallet_id, bank_name, account_number, account_name, bank_code, is_primary, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            wallet_id, bank_name, account_number, account_name, bank_code,
            int(is_primary), to_db(utcnow()),
        )
        return await self.get_by_id(cursor.lastrowid)

    async def get_by_id(self, account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        row = await self.db.fetchrow("SELECT * FROM bank_accounts WHERE id = ?", account_id)
        if row:
            return BankAccount.from_row(row)
        return None

    async def get_by_number(self, wallet_id: int, account_number: str) -> Optional[BankAccount]:
        """Get a wallet's bank account by account number."""
        row = await self.db.fetchrow(
            "SELECT * FROM bank_accounts WHERE wallet_id = ? AND account_number = ?",
            wallet_id, account_number,
        )
        if row:
            return BankAccount.from_row(row)
        return None

    async def get_for_wallet(self, wallet_id: int) -> List[BankAccount]:
        """Bank accounts on a wallet, primary first."""
        rows = await self.db.fetch(
            "SELECT * FROM bank_accounts WHERE wallet_id = ? ORDER BY is_primary DESC, id",
            wallet_id,
        )
        return [BankAccount.from_row(row) for row in rows]

    async def count_for_wallet(self, wallet_id: int) -> int:
        return await self.db.fetchval(
            "SELECT COUNT(*) FROM bank_accounts WHERE wallet_id = ?", wallet_id
        )
