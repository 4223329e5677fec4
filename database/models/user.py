"""User model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from utils.time import parse_timestamp


@dataclass
class User:
    """User data model."""

    id: int
    role: str  # buyer | developer | creator | admin
    full_name: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    tier: Optional[int]  # creators only, None when not qualified
    tier_updated_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row) -> "User":
        """Create User from database row."""
        return cls(
            id=row["id"],
            role=row["role"],
            full_name=row["full_name"],
            email=row["email"],
            phone=row["phone"],
            tier=row["tier"],
            tier_updated_at=parse_timestamp(row["tier_updated_at"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )

    @property
    def display_name(self) -> str:
        """Get display name for user."""
        if self.full_name:
            return self.full_name
        if self.email:
            return self.email
        return f"User {self.id}"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_creator(self) -> bool:
        return self.role == "creator"
