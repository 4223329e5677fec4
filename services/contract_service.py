"""Contract of sale service: generation, developer signature and Reach countersignature."""

import logging
from typing import Optional

from config import settings
from config.constants import (
    CONTRACT_DISPUTE_CLAUSE,
    CONTRACT_HANDOVER_DOCUMENTS,
    CONTRACT_TERMINATION_CLAUSE,
    CREATOR_TIERS,
    NOTIFY_CONTRACT_EXECUTED,
    NOTIFY_CONTRACT_GENERATED,
)
from core.errors import ForbiddenError, NotFoundError, ValidationError
from core.security import DocumentSigner
from database.connection import Database
from database.models import Contract, Property, User
from database.repositories import ContractRepository, HandoverRepository, PropertyRepository
from services.notification_service import NotificationService
from utils.time import utcnow

logger = logging.getLogger(__name__)


class ContractService:
    """Service for the contract of sale between a developer and Reach."""

    def __init__(
        self,
        db: Database,
        notification_service: Optional[NotificationService] = None,
        signer: Optional[DocumentSigner] = None,
        platform_fee_percent: Optional[float] = None,
    ):
        self.db = db
        self.contract_repo = ContractRepository(db)
        self.property_repo = PropertyRepository(db)
        self.handover_repo = HandoverRepository(db)
        self.notifications = notification_service
        self.signer = signer or DocumentSigner(settings.signing_secret)
        self.platform_fee_percent = (
            platform_fee_percent if platform_fee_percent is not None
            else settings.platform_fee_percent
        )

    @staticmethod
    def _document_id(contract_id: int) -> str:
        return f"contract-{contract_id}"

    def _terms(self, prop: Property) -> dict:
        return {
            "property": {"id": prop.id, "title": prop.title},
            "asking_price": str(prop.asking_price),
            "platform_fee_percent": str(self.platform_fee_percent),
            "creator_commission_percent_by_tier": {
                label: str(commission) for _, label, *_, commission in CREATOR_TIERS
            },
            "document_handover_obligations": list(CONTRACT_HANDOVER_DOCUMENTS),
            "dispute_resolution_clause": CONTRACT_DISPUTE_CLAUSE,
            "termination_clause": CONTRACT_TERMINATION_CLAUSE,
        }

    async def _load(self, contract_id: int) -> Contract:
        contract = await self.contract_repo.get_by_id(contract_id)
        if not contract:
            raise NotFoundError("Contract")
        return contract

    async def generate_contract(self, property_id: int, admin: User) -> Contract:
        """
        Generate the contract of sale for a sale listing.

        Returns the existing contract if one was already generated.

        Raises:
            ForbiddenError: Actor is not an admin
            NotFoundError: Property does not exist
            ValidationError: Listing is not for sale
        """
        if not admin.is_admin:
            raise ForbiddenError("Only admins can generate contracts")

        prop = await self.property_repo.get_by_id(property_id)
        if not prop:
            raise NotFoundError("Property")
        if prop.listing_type != "sale":
            raise ValidationError("Contract of sale can only be generated for sale listings")

        async with self.db.transaction():
            existing = await self.contract_repo.get_by_property(prop.id)
            if existing:
                logger.info(f"Contract {existing.id} already exists for property {prop.id}")
                return existing
            contract = await self.contract_repo.create(prop.id, prop.developer_id, self._terms(prop))

        logger.info(f"Contract {contract.id} generated for property {prop.id} by admin {admin.id}")
        if self.notifications:
            await self.notifications.notify(
                prop.developer_id, NOTIFY_CONTRACT_GENERATED, "Contract ready to sign",
                f"The contract of sale for {prop.title} is ready for your signature.",
                {"contract_id": contract.id, "property_id": prop.id},
            )
        return contract

    async def sign_as_developer(
        self, contract_id: int, developer: User, ip_address: Optional[str] = None
    ) -> Contract:
        """
        Developer signs the contract.

        Raises:
            NotFoundError: Contract does not exist
            ForbiddenError: Actor is not the contract's developer
            ValidationError: Contract is not awaiting the developer's signature
        """
        contract = await self._load(contract_id)
        if developer.role != "developer" or contract.developer_id != developer.id:
            raise ForbiddenError("You are not the developer on this contract")

        signed_at = utcnow()
        signature = self.signer.sign(self._document_id(contract.id), developer.id, "developer", signed_at)
        if not await self.contract_repo.record_developer_signature(
            contract.id, signature, signed_at, ip_address
        ):
            raise ValidationError("Contract is not in a state that allows developer signature")

        logger.info(f"Contract {contract.id} signed by developer {developer.id}")
        return await self._load(contract.id)

    async def countersign(self, contract_id: int, admin: User) -> Contract:
        """
        Reach countersigns a developer-signed contract, executing it.

        Raises:
            ForbiddenError: Actor is not an admin
            NotFoundError: Contract does not exist
            ValidationError: Developer has not signed yet, or already executed
        """
        if not admin.is_admin:
            raise ForbiddenError("Only admins can countersign contracts")
        contract = await self._load(contract_id)

        signed_at = utcnow()
        signature = self.signer.sign(self._document_id(contract.id), admin.id, "reach", signed_at)
        if not await self.contract_repo.record_reach_signature(
            contract.id, admin.id, signature, signed_at
        ):
            raise ValidationError("Contract must be signed by developer first")

        executed = await self._load(contract.id)
        logger.info(f"Contract {contract.id} executed; countersigned by admin {admin.id}")
        if self.notifications:
            await self.notifications.notify(
                executed.developer_id, NOTIFY_CONTRACT_EXECUTED, "Contract executed",
                "Reach has countersigned your contract of sale.",
                {"contract_id": executed.id, "property_id": executed.property_id},
            )
        return executed

    async def get_contract(self, contract_id: int, viewer: User) -> Contract:
        """Contract visible to its developer, admins and buyers of the property."""
        contract = await self._load(contract_id)
        if viewer.is_admin or viewer.id == contract.developer_id:
            return contract
        if await self.handover_repo.get_by_property_buyer(contract.property_id, viewer.id):
            return contract
        raise ForbiddenError("You do not have access to this contract")

    def verify_signatures(self, contract: Contract) -> bool:
        """Check both stored signatures against the signing secret."""
        if not contract.is_executed:
            return False
        document_id = self._document_id(contract.id)
        return (
            self.signer.verify(
                contract.developer_signature, document_id, contract.developer_id,
                "developer", contract.developer_signed_at,
            )
            and self.signer.verify(
                contract.reach_signature, document_id, contract.reach_admin_id,
                "reach", contract.reach_signed_at,
            )
        )
