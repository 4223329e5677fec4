"""Handover service: drives the post-sale workflow and releases escrow."""

import logging
from typing import Any, Dict, List, Optional

from config import settings
from config.constants import (
    ACTIVITY_CREATOR_COMMISSION,
    ACTIVITY_ESCROW_RELEASE,
    NOTIFY_CONFIRM_RECEIPT,
    NOTIFY_DOCUMENTS_SIGNED,
    NOTIFY_DOCUMENTS_SUBMITTED,
    NOTIFY_DOCUMENTS_VERIFIED,
    NOTIFY_HANDOVER_COMPLETED,
    NOTIFY_KEYS_DELIVERED,
    NOTIFY_KEYS_RELEASED,
    NOTIFY_PAYMENT_CONFIRMED,
)
from core.errors import ForbiddenError, NotFoundError, ValidationError
from core.handover import ActorRole, HandoverAction, HandoverStateMachine, HandoverStatus
from core.security import DocumentSigner
from database.connection import Database
from database.models import Handover, HandoverSignature, User
from database.repositories import EscrowRepository, HandoverRepository
from services.notification_service import NotificationService
from services.wallet_service import WalletService
from utils.formatters import format_naira
from utils.time import utcnow

logger = logging.getLogger(__name__)


# action -> (recipients, kind, title, message)
_NOTICES = {
    HandoverAction.CONFIRM_PAYMENT: (
        ("developer",), NOTIFY_PAYMENT_CONFIRMED, "Payment confirmed",
        "Payment for handover #{id} is confirmed. Please submit the property documents.",
    ),
    HandoverAction.SUBMIT_DOCUMENTS: (
        ("buyer",), NOTIFY_DOCUMENTS_SUBMITTED, "Documents submitted",
        "The developer has submitted documents for handover #{id}. Reach is reviewing them.",
    ),
    HandoverAction.VERIFY_DOCUMENTS: (
        ("developer", "buyer"), NOTIFY_DOCUMENTS_VERIFIED, "Documents verified",
        "Documents for handover #{id} are verified. The developer can now release the keys.",
    ),
    HandoverAction.RELEASE_KEYS: (
        ("buyer",), NOTIFY_KEYS_RELEASED, "Keys released",
        "The developer has released the keys for handover #{id}.",
    ),
    HandoverAction.REACH_SIGN: (
        ("buyer",), NOTIFY_DOCUMENTS_SIGNED, "Please sign",
        "Reach has signed the handover documents for #{id}. Your signature is needed.",
    ),
    HandoverAction.BUYER_SIGN: (
        ("developer",), NOTIFY_DOCUMENTS_SIGNED, "Buyer signed",
        "The buyer has signed the handover documents for #{id}.",
    ),
    HandoverAction.DELIVER_KEYS: (
        ("developer",), NOTIFY_KEYS_DELIVERED, "Keys delivered",
        "Keys for handover #{id} have been delivered to the buyer.",
    ),
    HandoverAction.DEVELOPER_CONFIRM: (
        ("buyer",), NOTIFY_CONFIRM_RECEIPT, "Confirm your handover",
        "The developer has confirmed handover #{id}. Please confirm you received the property.",
    ),
}


class HandoverService:
    """Service for advancing handovers through their state machine."""

    def __init__(
        self,
        db: Database,
        notification_service: Optional[NotificationService] = None,
        wallet_service: Optional[WalletService] = None,
        signer: Optional[DocumentSigner] = None,
    ):
        self.db = db
        self.handover_repo = HandoverRepository(db)
        self.escrow_repo = EscrowRepository(db)
        self.wallet_service = wallet_service or WalletService(db)
        self.notifications = notification_service
        self.signer = signer or DocumentSigner(settings.signing_secret)

    # ==================== Lookups ====================

    async def get_handover(self, handover_id: int) -> Handover:
        """Get handover by ID or raise NotFoundError."""
        handover = await self.handover_repo.get_by_id(handover_id)
        if not handover:
            raise NotFoundError("Handover")
        return handover

    async def get_for_property(self, property_id: int, buyer_id: int) -> Handover:
        """Get the handover for a (property, buyer) pair or raise NotFoundError."""
        handover = await self.handover_repo.get_by_property_buyer(property_id, buyer_id)
        if not handover:
            raise NotFoundError("Handover")
        return handover

    async def get_signatures(self, handover_id: int) -> List[HandoverSignature]:
        return await self.handover_repo.get_signatures(handover_id)

    # ==================== Internals ====================

    @staticmethod
    def _actor_role(handover: Handover, actor: User) -> ActorRole:
        """Resolve the actor's role on this handover, checking ownership."""
        role = ActorRole(actor.role)
        if role == ActorRole.DEVELOPER and actor.id != handover.developer_id:
            raise ForbiddenError("You are not the developer on this handover")
        if role == ActorRole.BUYER and actor.id != handover.buyer_id:
            raise ForbiddenError("You are not the buyer on this handover")
        return role

    async def _advance(
        self,
        handover_id: int,
        actor: User,
        action: HandoverAction,
        documents: Optional[List[Dict[str, Any]]] = None,
    ) -> Handover:
        handover = await self.get_handover(handover_id)
        machine = HandoverStateMachine(handover.type)
        target = machine.next_status(handover.status, action, self._actor_role(handover, actor))
        transition = machine.transition_for(action)

        updated = await self.handover_repo.transition(
            handover.id, handover.status, target, transition.timestamp_field, documents=documents,
        )
        logger.info(
            f"Handover {handover.id}: {handover.status.value} -> {target.value} "
            f"({action.value} by user {actor.id})"
        )
        await self._notify(updated, action)
        return updated

    async def _sign(self, handover_id: int, actor: User, action: HandoverAction, role: str) -> HandoverSignature:
        handover = await self.get_handover(handover_id)
        machine = HandoverStateMachine(handover.type)
        target = machine.next_status(handover.status, action, self._actor_role(handover, actor))
        transition = machine.transition_for(action)

        signed_at = utcnow()
        signature = self.signer.sign(handover.id, actor.id, role, signed_at)
        async with self.db.transaction():
            await self.handover_repo.transition(
                handover.id, handover.status, target, transition.timestamp_field, at=signed_at,
            )
            record = await self.handover_repo.add_signature(
                handover.id, actor.id, role, signature, signed_at,
            )

        logger.info(f"Handover {handover.id} signed by {role} (user {actor.id})")
        await self._notify(await self.get_handover(handover.id), action)
        return record

    async def _notify(self, handover: Handover, action: HandoverAction) -> None:
        notice = _NOTICES.get(action)
        if not self.notifications or not notice:
            return
        recipients, kind, title, message = notice
        data = {"handover_id": handover.id, "status": handover.status.value}
        for party in recipients:
            user_id = handover.buyer_id if party == "buyer" else handover.developer_id
            await self.notifications.notify(user_id, kind, title, message.format(id=handover.id), data)

    # ==================== Sale flow ====================

    async def confirm_payment(self, handover_id: int, actor: User) -> Handover:
        """Admin confirms the payment; developer documents are now due."""
        return await self._advance(handover_id, actor, HandoverAction.CONFIRM_PAYMENT)

    async def submit_documents(
        self,
        handover_id: int,
        actor: User,
        documents: List[Dict[str, Any]],
    ) -> Handover:
        """
        Developer submits property documents.

        Args:
            handover_id: Handover ID
            actor: Developer who owns the handover
            documents: [{"document_type": ..., "file_url": ...}, ...]

        Raises:
            ValidationError: Empty or malformed documents, or wrong status
        """
        if not documents:
            raise ValidationError("At least one document is required")
        cleaned = []
        for document in documents:
            if not isinstance(document, dict) or not document.get("document_type") or not document.get("file_url"):
                raise ValidationError("Each document needs a document_type and file_url")
            cleaned.append({
                "document_type": str(document["document_type"]),
                "file_url": str(document["file_url"]),
            })
        return await self._advance(
            handover_id, actor, HandoverAction.SUBMIT_DOCUMENTS, documents=cleaned,
        )

    async def verify_documents(self, handover_id: int, actor: User) -> Handover:
        """Admin verifies the submitted documents."""
        return await self._advance(handover_id, actor, HandoverAction.VERIFY_DOCUMENTS)

    async def release_keys(self, handover_id: int, actor: User) -> Handover:
        """Developer confirms the keys were released."""
        return await self._advance(handover_id, actor, HandoverAction.RELEASE_KEYS)

    async def reach_sign(self, handover_id: int, actor: User) -> HandoverSignature:
        """Reach (admin) countersigns the handover documents."""
        return await self._sign(handover_id, actor, HandoverAction.REACH_SIGN, "reach")

    async def buyer_sign(self, handover_id: int, actor: User) -> HandoverSignature:
        """Buyer signs the handover documents."""
        return await self._sign(handover_id, actor, HandoverAction.BUYER_SIGN, "buyer")

    async def deliver_keys(self, handover_id: int, actor: User) -> Handover:
        """Buyer or admin confirms physical key delivery."""
        return await self._advance(handover_id, actor, HandoverAction.DELIVER_KEYS)

    async def complete(self, handover_id: int, actor: User) -> Handover:
        """
        Complete a sale handover and release its escrow.

        Calling this on an already completed handover is a no-op.

        Raises:
            ValidationError: Obligations not met, or escrow not held
        """
        handover = await self.get_handover(handover_id)
        if handover.is_completed:
            logger.info(f"Handover {handover.id} already completed; nothing to do")
            return handover
        return await self._finish(handover, actor, HandoverAction.COMPLETE)

    # ==================== Rental flow ====================

    async def developer_confirm(self, handover_id: int, actor: User) -> Handover:
        """Developer confirms a rental handover; buyer confirmation is next."""
        return await self._advance(handover_id, actor, HandoverAction.DEVELOPER_CONFIRM)

    async def buyer_confirm(self, handover_id: int, actor: User) -> Handover:
        """Buyer confirms receipt of a rental; completes it and releases escrow."""
        handover = await self.get_handover(handover_id)
        if handover.is_completed:
            logger.info(f"Handover {handover.id} already completed; nothing to do")
            return handover
        return await self._finish(handover, actor, HandoverAction.BUYER_CONFIRM)

    # ==================== Completion ====================

    async def _finish(self, handover: Handover, actor: User, action: HandoverAction) -> Handover:
        machine = HandoverStateMachine(handover.type)
        if not machine.is_completion(action):
            raise ValueError(f"{action.value} does not complete a {handover.type.value} handover")
        machine.next_status(handover.status, action, self._actor_role(handover, actor))
        machine.check_completion(handover)
        transition = machine.transition_for(action)

        async with self.db.transaction():
            current = await self.get_handover(handover.id)
            if current.is_completed:
                return current

            escrow = await self.escrow_repo.get_by_id(current.escrow_id)
            if not escrow:
                raise NotFoundError("Escrow")
            if not escrow.is_held:
                raise ValidationError(f"Escrow is {escrow.status.value}; funds cannot be released")

            await self.handover_repo.transition(
                current.id, current.status, HandoverStatus.COMPLETED,
                transition.timestamp_field, extra_fields=("completed_at",),
            )
            if not await self.escrow_repo.mark_released(escrow.id):
                raise ValidationError("Escrow is no longer held")

            reference = f"escrow-{escrow.id}"
            if escrow.developer_amount > 0:
                await self.wallet_service.release_held(
                    escrow.developer_id,
                    escrow.developer_amount,
                    description=f"Escrow released for handover #{current.id}",
                    reference=reference,
                    action=ACTIVITY_ESCROW_RELEASE,
                )
            if escrow.creator_id and escrow.creator_amount > 0:
                await self.wallet_service.credit(
                    escrow.creator_id,
                    escrow.creator_amount,
                    description=f"Commission for handover #{current.id}",
                    reference=reference,
                    action=ACTIVITY_CREATOR_COMMISSION,
                )

        completed = await self.get_handover(handover.id)
        logger.info(
            f"Handover {completed.id} completed by user {actor.id}; escrow {escrow.id} released "
            f"(developer {format_naira(escrow.developer_amount)}, creator {format_naira(escrow.creator_amount)})"
        )

        if self.notifications:
            data = {"handover_id": completed.id, "escrow_id": escrow.id}
            await self.notifications.notify(
                escrow.developer_id, NOTIFY_HANDOVER_COMPLETED, "Handover complete",
                f"{format_naira(escrow.developer_amount)} has been released to your wallet.", data,
            )
            if escrow.creator_id and escrow.creator_amount > 0:
                await self.notifications.notify(
                    escrow.creator_id, NOTIFY_HANDOVER_COMPLETED, "Commission paid",
                    f"{format_naira(escrow.creator_amount)} commission has been added to your wallet.", data,
                )
            await self.notifications.notify(
                escrow.buyer_id, NOTIFY_HANDOVER_COMPLETED, "Handover complete",
                f"Handover #{completed.id} is complete. Enjoy your new property!", data,
            )
        return completed
