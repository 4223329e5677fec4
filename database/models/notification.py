"""In-app notification model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict
import json

from utils.time import parse_timestamp


@dataclass
class Notification:
    """Notification data model."""

    id: int
    user_id: int
    kind: str
    title: str
    message: str
    is_read: bool
    created_at: datetime
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row) -> "Notification":
        """Create Notification from database row."""
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            kind=row["kind"],
            title=row["title"],
            message=row["message"],
            is_read=bool(row["is_read"]),
            created_at=parse_timestamp(row["created_at"]),
            data=json.loads(row["data"]) if row["data"] else {},
        )
