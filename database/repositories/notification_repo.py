"""Notification repository for database operations."""

import json
from typing import Any, Dict, List, Optional

from database.connection import Database
from database.models import Notification
from utils.time import utcnow, to_db


class NotificationRepository:
    """Repository for in-app notifications."""

    def __init__(self, db: Database):
        self.db = db

    async def create(
        self,
        user_id: int,
        kind: str,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        """Store a notification."""
        cursor = await self.db.execute(
            """
            INSERT INTO notifications (user_id, kind, title, message, data, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            user_id, kind, title, message, json.dumps(data or {}, default=str),
            to_db(utcnow()),
        )
        row = await self.db.fetchrow("SELECT * FROM notifications WHERE id = ?", cursor.lastrowid)
        return Notification.from_row(row)

    async def get_for_user(
        self, user_id: int, unread_only: bool = False, limit: int = 20
    ) -> List[Notification]:
        """Notifications for a user, newest first."""
        query = "SELECT * FROM notifications WHERE user_id = ?"
        if unread_only:
            query += " AND is_read = 0"
        query += " ORDER BY id DESC LIMIT ?"
        rows = await self.db.fetch(query, user_id, limit)
        return [Notification.from_row(row) for row in rows]

    async def mark_read(self, notification_id: int, user_id: int) -> bool:
        """Mark a user's notification read. Returns False if not theirs."""
        cursor = await self.db.execute(
            "UPDATE notifications SET is_read = 1 WHERE id = ? AND user_id = ?",
            notification_id, user_id,
        )
        return cursor.rowcount == 1
