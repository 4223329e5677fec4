"""Contract of sale repository."""

import json
from datetime import datetime
from typing import Any, Dict, Optional

from database.connection import Database
from database.models import Contract, ContractStatus
from utils.time import utcnow, to_db


class ContractRepository:
    """Repository for contract of sale operations."""

    def __init__(self, db: Database):
        self.db = db

    async def create(self, property_id: int, developer_id: int, terms: Dict[str, Any]) -> Contract:
        """Create a contract awaiting the developer's signature."""
        now = to_db(utcnow())
        cursor = await self.db.execute(
            """
            INSERT INTO contracts_of_sale
            (property_id, developer_id, terms, status, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            property_id, developer_id, json.dumps(terms, default=str),
            ContractStatus.PENDING_DEVELOPER_SIGNATURE.value, now, now,
        )
        return await self.get_by_id(cursor.lastrowid)

    async def get_by_id(self, contract_id: int) -> Optional[Contract]:
        """Get contract by ID."""
        row = await self.db.fetchrow("SELECT * FROM contracts_of_sale WHERE id = ?", contract_id)
        if row:
            return Contract.from_row(row)
        return None

    async def get_by_property(self, property_id: int) -> Optional[Contract]:
        """Get the contract for a listing."""
        row = await self.db.fetchrow(
            "SELECT * FROM contracts_of_sale WHERE property_id = ?", property_id
        )
        if row:
            return Contract.from_row(row)
        return None

    async def record_developer_signature(
        self,
        contract_id: int,
        signature: str,
        signed_at: datetime,
        ip_address: Optional[str] = None,
    ) -> bool:
        """pending_developer_signature -> signed_by_developer. False if the status moved."""
        stamp = to_db(signed_at)
        cursor = await self.db.execute(
            """
            UPDATE contracts_of_sale
            SET status = ?, developer_signature = ?, developer_signed_at = ?,
                developer_ip_address = ?, updated_at = ?
            WHERE id = ? AND status = ?
            """,
            ContractStatus.SIGNED_BY_DEVELOPER.value, signature, stamp, ip_address, stamp,
            contract_id, ContractStatus.PENDING_DEVELOPER_SIGNATURE.value,
        )
        return cursor.rowcount == 1

    async def record_reach_signature(
        self,
        contract_id: int,
        admin_id: int,
        signature: str,
        signed_at: datetime,
    ) -> bool:
        """signed_by_developer -> executed. False if the status moved."""
        stamp = to_db(signed_at)
        cursor = await self.db.execute(
            """
            UPDATE contracts_of_sale
            SET status = ?, reach_signature = ?, reach_signed_at = ?,
                reach_admin_id = ?, updated_at = ?
            WHERE id = ? AND status = ?
            """,
            ContractStatus.EXECUTED.value, signature, stamp, admin_id, stamp,
            contract_id, ContractStatus.SIGNED_BY_DEVELOPER.value,
        )
        return cursor.rowcount == 1
