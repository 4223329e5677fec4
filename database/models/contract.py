"""Contract of sale model."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from utils.time import parse_timestamp


class ContractStatus(str, Enum):
    """Contract of sale status."""
    PENDING_DEVELOPER_SIGNATURE = "pending_developer_signature"
    SIGNED_BY_DEVELOPER = "signed_by_developer"
    EXECUTED = "executed"


@dataclass
class Contract:
    """Contract of sale between a developer and Reach for one listing."""

    id: int
    property_id: int
    developer_id: int
    status: ContractStatus
    created_at: datetime
    updated_at: datetime
    terms: Dict[str, Any] = field(default_factory=dict)
    developer_signature: Optional[str] = None
    developer_signed_at: Optional[datetime] = None
    developer_ip_address: Optional[str] = None
    reach_signature: Optional[str] = None
    reach_signed_at: Optional[datetime] = None
    reach_admin_id: Optional[int] = None

    @classmethod
    def from_row(cls, row) -> "Contract":
        """Create Contract from database row."""
        return cls(
            id=row["id"],
            property_id=row["property_id"],
            developer_id=row["developer_id"],
            status=ContractStatus(row["status"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
            terms=json.loads(row["terms"]) if row["terms"] else {},
            developer_signature=row["developer_signature"],
            developer_signed_at=parse_timestamp(row["developer_signed_at"]),
            developer_ip_address=row["developer_ip_address"],
            reach_signature=row["reach_signature"],
            reach_signed_at=parse_timestamp(row["reach_signed_at"]),
            reach_admin_id=row["reach_admin_id"],
        )

    @property
    def is_executed(self) -> bool:
        return self.status == ContractStatus.EXECUTED
