"""Purchase service: turns a successful payment into a held escrow and handover."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from config import settings
from config.constants import (
    NOTIFY_CREATOR_SALE,
    NOTIFY_PAYMENT_CONFIRMED,
    NOTIFY_PROPERTY_PAYMENT_RECEIVED,
)
from core.errors import NotFoundError, ValidationError
from core.handover import HandoverType
from core.payout import compute_splits, to_money
from core.tiers import TierResult, tier_result_for
from database.connection import Database
from database.models import EscrowTransaction, Handover
from database.repositories import (
    EscrowRepository,
    HandoverRepository,
    PropertyRepository,
    UserRepository,
)
from services.lead_service import LeadService
from services.notification_service import NotificationService
from services.wallet_service import WalletService
from utils.formatters import format_naira

logger = logging.getLogger(__name__)


@dataclass
class PaymentEvent:
    """Payment-succeeded signal from the payment gateway."""
    transaction_id: str
    amount: Decimal
    property_id: int
    buyer_id: int
    developer_id: int
    reference: Optional[str] = None

    @property
    def payment_reference(self) -> str:
        return self.reference or self.transaction_id


@dataclass
class PurchaseResult:
    """Escrow and handover created (or found) for a payment."""
    escrow: EscrowTransaction
    handover: Handover
    created: bool = True


class PurchaseService:
    """Service for completing property purchases."""

    def __init__(
        self,
        db: Database,
        notification_service: Optional[NotificationService] = None,
        wallet_service: Optional[WalletService] = None,
        platform_fee_percent: Optional[float] = None,
    ):
        self.db = db
        self.escrow_repo = EscrowRepository(db)
        self.handover_repo = HandoverRepository(db)
        self.property_repo = PropertyRepository(db)
        self.user_repo = UserRepository(db)
        self.lead_service = LeadService(db)
        self.wallet_service = wallet_service or WalletService(db)
        self.notifications = notification_service
        self.platform_fee_percent = (
            platform_fee_percent if platform_fee_percent is not None
            else settings.platform_fee_percent
        )

    async def _find_existing(self, event: PaymentEvent) -> Optional[PurchaseResult]:
        escrow = await self.escrow_repo.get_by_reference(event.payment_reference)
        if escrow is None:
            escrow = await self.escrow_repo.get_by_property_buyer(event.property_id, event.buyer_id)
        if escrow is None:
            return None
        handover = await self.handover_repo.get_by_escrow(escrow.id)
        return PurchaseResult(escrow=escrow, handover=handover, created=False)

    async def _creator_commission(self, creator_id: Optional[int]) -> Tuple[Optional[int], TierResult]:
        """Tier snapshot of the attributed creator at payment time."""
        if creator_id is None:
            return None, TierResult.unqualified()
        creator = await self.user_repo.get_by_id(creator_id)
        if not creator or not creator.is_creator:
            logger.warning(f"Attributed creator {creator_id} missing or not a creator; ignoring")
            return None, TierResult.unqualified()
        return creator_id, tier_result_for(creator.tier)

    async def complete_property_purchase(self, event: PaymentEvent) -> PurchaseResult:
        """
        Create the held escrow and its handover for a successful payment.

        Idempotent: a repeated payment event (same reference, or same
        property and buyer) returns the existing pair.

        Args:
            event: Payment details from the gateway

        Returns:
            PurchaseResult with escrow and handover

        Raises:
            NotFoundError: Property or buyer does not exist
            ValidationError: Bad amount or developer mismatch
        """
        existing = await self._find_existing(event)
        if existing:
            logger.info(f"Payment {event.payment_reference} already processed (escrow {existing.escrow.id})")
            return existing

        amount = to_money(event.amount)
        if amount <= 0:
            raise ValidationError("Payment amount must be positive")

        async with self.db.transaction():
            # Re-check under the write lock
            existing = await self._find_existing(event)
            if existing:
                return existing

            prop = await self.property_repo.get_by_id(event.property_id)
            if not prop:
                raise NotFoundError("Property")
            if prop.developer_id != event.developer_id:
                raise ValidationError("Developer does not own this property")
            buyer = await self.user_repo.get_by_id(event.buyer_id)
            if not buyer:
                raise NotFoundError("Buyer")

            attributed = await self.lead_service.get_attributed_creator(prop.id, buyer.id)
            creator_id, tier = await self._creator_commission(attributed)
            splits = compute_splits(amount, tier.commission_percent, self.platform_fee_percent)

            escrow = await self.escrow_repo.create(
                property_id=prop.id,
                buyer_id=buyer.id,
                developer_id=prop.developer_id,
                creator_id=creator_id,
                amount=amount,
                splits=splits,
                creator_tier=tier.tier,
                creator_commission_percent=tier.commission_percent,
                payment_reference=event.payment_reference,
            )
            handover = await self.handover_repo.create(
                property_id=prop.id,
                escrow_id=escrow.id,
                buyer_id=buyer.id,
                developer_id=prop.developer_id,
                creator_id=creator_id,
                handover_type=HandoverType.from_listing_type(prop.listing_type),
            )
            if splits.developer_amount > 0:
                await self.wallet_service.hold(
                    prop.developer_id,
                    splits.developer_amount,
                    description=f"Payment held in escrow for {prop.title}",
                    reference=event.payment_reference,
                )
            await self.property_repo.update_status(prop.id, prop.status_after_purchase)

        logger.info(
            f"Escrow {escrow.id} held for property {prop.id}: {format_naira(amount)} "
            f"(developer {splits.developer_amount}, creator {splits.creator_amount}, "
            f"reach {splits.reach_amount}); handover {handover.id} ({handover.type.value})"
        )

        await self._notify_parties(escrow, handover, prop.title)
        return PurchaseResult(escrow=escrow, handover=handover, created=True)

    async def _notify_parties(self, escrow: EscrowTransaction, handover: Handover, title: str) -> None:
        if not self.notifications:
            return
        data = {"escrow_id": escrow.id, "handover_id": handover.id, "property_id": escrow.property_id}
        await self.notifications.notify(
            escrow.buyer_id, NOTIFY_PAYMENT_CONFIRMED, "Payment confirmed",
            f"Your payment of {format_naira(escrow.amount)} for {title} is held in escrow.",
            data,
        )
        await self.notifications.notify(
            escrow.developer_id, NOTIFY_PROPERTY_PAYMENT_RECEIVED, "Payment received",
            f"{format_naira(escrow.developer_amount)} for {title} is held until handover completes. "
            "Please upload the property documents.",
            data,
        )
        if escrow.creator_id and escrow.creator_amount > 0:
            await self.notifications.notify(
                escrow.creator_id, NOTIFY_CREATOR_SALE, "Sale attributed to you",
                f"You will earn {format_naira(escrow.creator_amount)} when the handover for {title} completes.",
                data,
            )
