"""Lead service: creator referral tracking and sale attribution."""

import hashlib
import logging
import secrets
from typing import List, Optional

from core.errors import NotFoundError, ValidationError
from database.connection import Database
from database.models import Lead
from database.repositories import LeadRepository, PropertyRepository, UserRepository
from utils.time import utcnow

logger = logging.getLogger(__name__)


class LeadService:
    """Service for recording leads and resolving the attributed creator."""

    def __init__(self, db: Database):
        self.db = db
        self.lead_repo = LeadRepository(db)
        self.property_repo = PropertyRepository(db)
        self.user_repo = UserRepository(db)

    @staticmethod
    def generate_tracking_code(creator_id: int, property_id: int) -> str:
        """Unique 16-character code for a creator's property link."""
        seed = f"{creator_id}:{property_id}:{utcnow().timestamp()}:{secrets.token_hex(8)}"
        return hashlib.sha256(seed.encode()).hexdigest()[:16]

    async def record_lead(
        self,
        property_id: int,
        buyer_id: int,
        creator_id: Optional[int] = None,
        tracking_code: Optional[str] = None,
    ) -> Lead:
        """
        Record a buyer's interest in a property.

        Args:
            property_id: Property the buyer enquired about
            buyer_id: Enquiring buyer
            creator_id: Creator whose link brought the buyer, if any
            tracking_code: Code from the creator's link

        Returns:
            Created Lead
        """
        prop = await self.property_repo.get_by_id(property_id)
        if not prop:
            raise NotFoundError("Property")

        if creator_id is not None:
            creator = await self.user_repo.get_by_id(creator_id)
            if not creator:
                raise NotFoundError("Creator")
            if not creator.is_creator:
                raise ValidationError("Leads can only be attributed to creators")

        lead = await self.lead_repo.create(property_id, buyer_id, creator_id, tracking_code)
        logger.info(
            f"Lead {lead.id}: buyer {buyer_id} on property {property_id}"
            + (f" via creator {creator_id}" if creator_id else "")
        )
        return lead

    async def get_attributed_creator(self, property_id: int, buyer_id: int) -> Optional[int]:
        """Creator credited with a buyer's purchase (most recent attributed lead)."""
        lead = await self.lead_repo.get_latest_attributed(property_id, buyer_id)
        return lead.creator_id if lead else None

    async def list_creator_leads(self, creator_id: int, limit: int = 50) -> List[Lead]:
        """Leads attributed to a creator, newest first."""
        return await self.lead_repo.get_by_creator(creator_id, limit)
