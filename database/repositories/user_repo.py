"""User repository for database operations."""

from typing import Optional, List

from database.connection import Database
from database.models import User
from utils.time import utcnow, to_db


class UserRepository:
    """Repository for user operations."""

    def __init__(self, db: Database):
        self.db = db

    async def create(
        self,
        role: str,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> User:
        """Create a new user."""
        now = to_db(utcnow())
        cursor = await self.db.execute(
            """
            INSERT INTO users (role, full_name, email, phone, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            role, full_name, email, phone, now, now,
        )
        return await self.get_by_id(cursor.lastrowid)

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        row = await self.db.fetchrow("SELECT * FROM users WHERE id = ?", user_id)
        if row:
            return User.from_row(row)
        return None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        row = await self.db.fetchrow("SELECT * FROM users WHERE email = ?", email)
        if row:
            return User.from_row(row)
        return None

    async def get_by_role(self, role: str) -> List[User]:
        """Get all users with a role."""
        rows = await self.db.fetch("SELECT * FROM users WHERE role = ? ORDER BY id", role)
        return [User.from_row(row) for row in rows]

    async def update_tier(self, user_id: int, tier: Optional[int]) -> None:
        """Store a creator's current tier snapshot (None when not qualified)."""
        now = to_db(utcnow())
        await self.db.execute(
            """
            UPDATE users
            SET tier = ?,
                tier_updated_at = ?,
                updated_at = ?
            WHERE id = ?
            """,
            tier, now, now, user_id,
        )
