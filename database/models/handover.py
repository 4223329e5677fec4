"""Handover and handover signature models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
import json

from core.handover import HandoverStatus, HandoverType
from utils.time import parse_timestamp


@dataclass
class Handover:
    """Post-sale document and key delivery record."""

    id: int
    property_id: int
    escrow_id: int
    buyer_id: int
    developer_id: int
    creator_id: Optional[int]
    type: HandoverType
    status: HandoverStatus
    created_at: datetime
    updated_at: datetime
    documents: List[Dict[str, Any]] = field(default_factory=list)
    payment_confirmed_at: Optional[datetime] = None
    documents_submitted_at: Optional[datetime] = None
    documents_verified_at: Optional[datetime] = None
    keys_released_at: Optional[datetime] = None
    reach_signed_at: Optional[datetime] = None
    buyer_signed_at: Optional[datetime] = None
    keys_delivered_at: Optional[datetime] = None
    developer_confirmed_at: Optional[datetime] = None
    buyer_confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "Handover":
        """Create Handover from database row."""
        documents = json.loads(row["documents"]) if row["documents"] else []
        return cls(
            id=row["id"],
            property_id=row["property_id"],
            escrow_id=row["escrow_id"],
            buyer_id=row["buyer_id"],
            developer_id=row["developer_id"],
            creator_id=row["creator_id"],
            type=HandoverType(row["type"]),
            status=HandoverStatus(row["status"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
            documents=documents,
            payment_confirmed_at=parse_timestamp(row["payment_confirmed_at"]),
            documents_submitted_at=parse_timestamp(row["documents_submitted_at"]),
            documents_verified_at=parse_timestamp(row["documents_verified_at"]),
            keys_released_at=parse_timestamp(row["keys_released_at"]),
            reach_signed_at=parse_timestamp(row["reach_signed_at"]),
            buyer_signed_at=parse_timestamp(row["buyer_signed_at"]),
            keys_delivered_at=parse_timestamp(row["keys_delivered_at"]),
            developer_confirmed_at=parse_timestamp(row["developer_confirmed_at"]),
            buyer_confirmed_at=parse_timestamp(row["buyer_confirmed_at"]),
            completed_at=parse_timestamp(row["completed_at"]),
        )

    @property
    def is_completed(self) -> bool:
        return self.status == HandoverStatus.COMPLETED


@dataclass
class HandoverSignature:
    """HMAC signature recorded by Reach or the buyer on a handover."""

    id: int
    handover_id: int
    signer_id: int
    role: str  # reach | buyer
    signature: str
    signed_at: datetime

    @classmethod
    def from_row(cls, row) -> "HandoverSignature":
        """Create HandoverSignature from database row."""
        return cls(
            id=row["id"],
            handover_id=row["handover_id"],
            signer_id=row["signer_id"],
            role=row["role"],
            signature=row["signature"],
            signed_at=parse_timestamp(row["signed_at"]),
        )
