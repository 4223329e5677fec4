"""Creator repository: social accounts and tier history."""

import json
from decimal import Decimal
from typing import Any, Dict, List, Optional

from database.connection import Database
from database.models import CreatorTierHistory, SocialAccount, User
from utils.time import utcnow, to_db


class CreatorRepository:
    """Repository for creator profile operations."""

    def __init__(self, db: Database):
        self.db = db

    async def add_social_account(self, user_id: int, platform: str, handle: str) -> SocialAccount:
        """Link a social account, replacing any existing handle for the platform."""
        await self.db.execute(
            """
            INSERT INTO social_accounts (user_id, platform, handle, created_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(user_id, platform) DO UPDATE SET handle = excluded.handle
            """,
            user_id, platform.lower(), handle.lstrip("@"), to_db(utcnow()),
        )
        row = await self.db.fetchrow(
            "SELECT * FROM social_accounts WHERE user_id = ? AND platform = ?",
            user_id, platform.lower(),
        )
        return SocialAccount.from_row(row)

    async def get_social_accounts(self, user_id: int) -> List[SocialAccount]:
        """Get all social accounts linked by a creator."""
        rows = await self.db.fetch(
            "SELECT * FROM social_accounts WHERE user_id = ? ORDER BY platform",
            user_id,
        )
        return [SocialAccount.from_row(row) for row in rows]

    async def get_creators(self) -> List[User]:
        """Get every creator user."""
        rows = await self.db.fetch("SELECT * FROM users WHERE role = 'creator' ORDER BY id")
        return [User.from_row(row) for row in rows]

    async def add_tier_history(
        self,
        creator_id: int,
        tier: int,
        commission_percent: Decimal,
        analytics_data: Optional[List[Dict[str, Any]]] = None,
    ) -> CreatorTierHistory:
        """Record one tier evaluation."""
        cursor = await self.db.execute(
            """
            INSERT INTO creator_tier_history
            (creator_id, tier, commission_percent, analytics_data, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            creator_id, tier, str(commission_percent),
            json.dumps(analytics_data or []), to_db(utcnow()),
        )
        row = await self.db.fetchrow(
            "SELECT * FROM creator_tier_history WHERE id = ?", cursor.lastrowid
        )
        return CreatorTierHistory.from_row(row)

    async def get_tier_history(self, creator_id: int, limit: int = 12) -> List[CreatorTierHistory]:
        """Most recent tier evaluations first."""
        rows = await self.db.fetch(
            """
            SELECT * FROM creator_tier_history
            WHERE creator_id = ?
            ORDER BY id DESC
            LIMIT ?
            """,
            creator_id, limit,
        )
        return [CreatorTierHistory.from_row(row) for row in rows]
