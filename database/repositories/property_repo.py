"""Property repository for database operations."""

from decimal import Decimal
from typing import Optional

from database.connection import Database
from database.models import Property
from utils.money import to_kobo
from utils.time import utcnow, to_db


class PropertyRepository:
    """Repository for property listing operations."""

    def __init__(self, db: Database):
        self.db = db

    async def create(
        self,
        developer_id: int,
        title: str,
        listing_type: str = "sale",
        asking_price: Decimal = Decimal("0"),
    ) -> Property:
        """Create a new listing."""
        now = to_db(utcnow())
        cursor = await self.db.execute(
            """
            INSERT INTO properties
            (developer_id, title, listing_type, asking_price, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            developer_id, title, listing_type, to_kobo(asking_price), now, now,
        )
        return await self.get_by_id(cursor.lastrowid)

    async def get_by_id(self, property_id: int) -> Optional[Property]:
        """Get property by ID."""
        row = await self.db.fetchrow("SELECT * FROM properties WHERE id = ?", property_id)
        if row:
            return Property.from_row(row)
        return None

    async def update_status(self, property_id: int, status: str) -> None:
        """Update listing status."""
        await self.db.execute(
            "UPDATE properties SET status = ?, updated_at = ? WHERE id = ?",
            status, to_db(utcnow()), property_id,
        )
