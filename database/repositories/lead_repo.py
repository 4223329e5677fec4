"""Lead repository for database operations."""

from typing import List, Optional

from database.connection import Database
from database.models import Lead
from utils.time import utcnow, to_db


class LeadRepository:
    """Repository for lead operations."""

    def __init__(self, db: Database):
        self.db = db

    async def create(
        self,
        property_id: int,
        buyer_id: int,
        creator_id: Optional[int] = None,
        tracking_code: Optional[str] = None,
    ) -> Lead:
        """Create a new lead."""
        cursor = await self.db.execute(
            """
            INSERT INTO leads (property_id, buyer_id, creator_id, tracking_code, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            property_id, buyer_id, creator_id, tracking_code, to_db(utcnow()),
        )
        row = await self.db.fetchrow("SELECT * FROM leads WHERE id = ?", cursor.lastrowid)
        return Lead.from_row(row)

    async def get_latest_attributed(self, property_id: int, buyer_id: int) -> Optional[Lead]:
        """Most recent lead for (property, buyer) that names a creator."""
        row = await self.db.fetchrow(
            """
            SELECT * FROM leads
            WHERE property_id = ? AND buyer_id = ? AND creator_id IS NOT NULL
            ORDER BY id DESC
            LIMIT 1
            """,
            property_id, buyer_id,
        )
        if row:
            return Lead.from_row(row)
        return None

    async def get_by_creator(self, creator_id: int, limit: int = 50) -> List[Lead]:
        """Leads attributed to a creator, newest first."""
        rows = await self.db.fetch(
            "SELECT * FROM leads WHERE creator_id = ? ORDER BY id DESC LIMIT ?",
            creator_id, limit,
        )
        return [Lead.from_row(row) for row in rows]
