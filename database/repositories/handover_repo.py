"""Handover repository for database operations."""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from core.errors import ValidationError
from core.handover import HandoverStatus, HandoverType
from core.handover.state_machine import stage_timestamp_fields
from database.connection import Database
from database.models import Handover, HandoverSignature
from utils.time import utcnow, to_db

_TIMESTAMP_COLUMNS = stage_timestamp_fields()


class HandoverRepository:
    """Repository for handover operations."""

    def __init__(self, db: Database):
        self.db = db

    async def create(
        self,
        property_id: int,
        escrow_id: int,
        buyer_id: int,
        developer_id: int,
        creator_id: Optional[int],
        handover_type: HandoverType,
    ) -> Handover:
        """Create a handover in payment_confirmed."""
        now = to_db(utcnow())
        cursor = await self.db.execute(
            """
            INSERT INTO handovers
            (property_id, escrow_id, buyer_id, developer_id, creator_id, type, status,
             payment_confirmed_at, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            property_id, escrow_id, buyer_id, developer_id, creator_id,
            HandoverType(handover_type).value, HandoverStatus.PAYMENT_CONFIRMED.value,
            now, now, now,
        )
        return await self.get_by_id(cursor.lastrowid)

    async def get_by_id(self, handover_id: int) -> Optional[Handover]:
        """Get handover by ID."""
        row = await self.db.fetchrow("SELECT * FROM handovers WHERE id = ?", handover_id)
        if row:
            return Handover.from_row(row)
        return None

    async def get_by_escrow(self, escrow_id: int) -> Optional[Handover]:
        """Get the handover paired with an escrow."""
        row = await self.db.fetchrow("SELECT * FROM handovers WHERE escrow_id = ?", escrow_id)
        if row:
            return Handover.from_row(row)
        return None

    async def get_by_property_buyer(self, property_id: int, buyer_id: int) -> Optional[Handover]:
        """Get the handover for a (property, buyer) pair."""
        row = await self.db.fetchrow(
            "SELECT * FROM handovers WHERE property_id = ? AND buyer_id = ?",
            property_id, buyer_id,
        )
        if row:
            return Handover.from_row(row)
        return None

    async def transition(
        self,
        handover_id: int,
        expected_status: HandoverStatus,
        new_status: HandoverStatus,
        timestamp_field: str,
        at: Optional[datetime] = None,
        documents: Optional[List[Dict[str, Any]]] = None,
        extra_fields: Sequence[str] = (),
    ) -> Handover:
        """
        Compare-and-swap the handover status and stamp the stage timestamp.

        Args:
            extra_fields: Further timestamp columns to stamp with the same time

        Raises:
            ValidationError: Status changed since it was read
        """
        fields = [timestamp_field] + [f for f in extra_fields if f != timestamp_field]
        for name in fields:
            if name not in _TIMESTAMP_COLUMNS:
                raise ValueError(f"Unknown handover timestamp column: {name}")

        stamp = to_db(at or utcnow())
        assignments = ["status = ?", "updated_at = ?"] + [f"{name} = ?" for name in fields]
        params: List[Any] = [HandoverStatus(new_status).value, stamp] + [stamp] * len(fields)
        if documents is not None:
            assignments.append("documents = ?")
            params.append(json.dumps(documents))

        cursor = await self.db.execute(
            f"UPDATE handovers SET {', '.join(assignments)} WHERE id = ? AND status = ?",
            *params, handover_id, HandoverStatus(expected_status).value,
        )
        if cursor.rowcount != 1:
            raise ValidationError("Handover was updated concurrently; reload and retry")
        return await self.get_by_id(handover_id)

    async def add_signature(
        self,
        handover_id: int,
        signer_id: int,
        role: str,
        signature: str,
        signed_at: datetime,
    ) -> HandoverSignature:
        """Store a Reach or buyer signature."""
        cursor = await self.db.execute(
            """
            INSERT INTO handover_signatures (handover_id, signer_id, role, signature, signed_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            handover_id, signer_id, role, signature, to_db(signed_at),
        )
        row = await self.db.fetchrow(
            "SELECT * FROM handover_signatures WHERE id = ?", cursor.lastrowid
        )
        return HandoverSignature.from_row(row)

    async def get_signatures(self, handover_id: int) -> List[HandoverSignature]:
        """Signatures recorded on a handover, oldest first."""
        rows = await self.db.fetch(
            "SELECT * FROM handover_signatures WHERE handover_id = ? ORDER BY id",
            handover_id,
        )
        return [HandoverSignature.from_row(row) for row in rows]
