"""Handover state machine: enforces the order of post-sale obligations.

Sale lifecycle (signature chain):
    payment_confirmed → pending_developer_docs → docs_submitted → docs_verified
    → keys_released → reach_signed → buyer_signed → keys_delivered → completed

Rental lifecycle (two-party confirmation):
    payment_confirmed → pending_developer_docs → awaiting_buyer_confirmation → completed

Documents may be submitted (sale) or delivery confirmed (rental) straight
from payment_confirmed. The handover type selects which transition table
applies. Completion is gated on obligation timestamps, not only on status.

Pure computation: no persistence, no side effects. The service layer
writes the resulting status with a compare-and-swap on the current one.
"""

import enum
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from core.errors import ForbiddenError, ValidationError


class HandoverStatus(str, enum.Enum):
    PAYMENT_CONFIRMED = "payment_confirmed"
    PENDING_DEVELOPER_DOCS = "pending_developer_docs"
    DOCS_SUBMITTED = "docs_submitted"
    DOCS_VERIFIED = "docs_verified"
    KEYS_RELEASED = "keys_released"
    REACH_SIGNED = "reach_signed"
    BUYER_SIGNED = "buyer_signed"
    KEYS_DELIVERED = "keys_delivered"
    AWAITING_BUYER_CONFIRMATION = "awaiting_buyer_confirmation"
    COMPLETED = "completed"


class HandoverType(str, enum.Enum):
    SALE = "sale"
    LONG_TERM_RENTAL = "long_term_rental"
    SHORT_TERM_RENTAL = "short_term_rental"

    @classmethod
    def from_listing_type(cls, listing_type: Optional[str]) -> "HandoverType":
        """Map a property listing type onto the handover flow it uses."""
        if listing_type == "sale":
            return cls.SALE
        if listing_type == "rent":
            return cls.LONG_TERM_RENTAL
        return cls.SHORT_TERM_RENTAL


class HandoverAction(str, enum.Enum):
    CONFIRM_PAYMENT = "confirm_payment"
    SUBMIT_DOCUMENTS = "submit_documents"
    VERIFY_DOCUMENTS = "verify_documents"
    RELEASE_KEYS = "release_keys"
    REACH_SIGN = "reach_sign"
    BUYER_SIGN = "buyer_sign"
    DELIVER_KEYS = "deliver_keys"
    DEVELOPER_CONFIRM = "developer_confirm"
    BUYER_CONFIRM = "buyer_confirm"
    COMPLETE = "complete"


class ActorRole(str, enum.Enum):
    BUYER = "buyer"
    DEVELOPER = "developer"
    CREATOR = "creator"
    ADMIN = "admin"


@dataclass(frozen=True)
class Transition:
    """One edge of a transition table."""

    action: HandoverAction
    sources: FrozenSet[HandoverStatus]
    target: HandoverStatus
    roles: FrozenSet[ActorRole]
    timestamp_field: str
    error: str


def _t(action, sources, target, roles, timestamp_field, error) -> Transition:
    return Transition(action, frozenset(sources), target, frozenset(roles), timestamp_field, error)


S = HandoverStatus
A = HandoverAction
R = ActorRole

_CONFIRM_PAYMENT = _t(
    A.CONFIRM_PAYMENT, {S.PAYMENT_CONFIRMED}, S.PENDING_DEVELOPER_DOCS, {R.ADMIN},
    "payment_confirmed_at", "Payment has already been confirmed for this handover",
)

_SALE_TRANSITIONS: Tuple[Transition, ...] = (
    _CONFIRM_PAYMENT,
    _t(
        A.SUBMIT_DOCUMENTS, {S.PAYMENT_CONFIRMED, S.PENDING_DEVELOPER_DOCS}, S.DOCS_SUBMITTED,
        {R.DEVELOPER}, "documents_submitted_at",
        "Handover not in a state that allows document submission",
    ),
    _t(
        A.VERIFY_DOCUMENTS, {S.DOCS_SUBMITTED}, S.DOCS_VERIFIED, {R.ADMIN},
        "documents_verified_at", "Documents must be submitted before they can be verified",
    ),
    _t(
        A.RELEASE_KEYS, {S.DOCS_VERIFIED}, S.KEYS_RELEASED, {R.DEVELOPER},
        "keys_released_at", "Documents must be verified before keys can be released",
    ),
    _t(
        A.REACH_SIGN, {S.KEYS_RELEASED}, S.REACH_SIGNED, {R.ADMIN},
        "reach_signed_at", "Keys must be released before Reach can sign",
    ),
    _t(
        A.BUYER_SIGN, {S.REACH_SIGNED}, S.BUYER_SIGNED, {R.BUYER},
        "buyer_signed_at", "Reach must sign documents first",
    ),
    _t(
        A.DELIVER_KEYS, {S.BUYER_SIGNED}, S.KEYS_DELIVERED, {R.BUYER, R.ADMIN},
        "keys_delivered_at", "Buyer must sign documents before keys are delivered",
    ),
    _t(
        A.COMPLETE, {S.KEYS_DELIVERED}, S.COMPLETED, {R.ADMIN},
        "completed_at", "Cannot complete handover: obligations not met",
    ),
)

_RENTAL_TRANSITIONS: Tuple[Transition, ...] = (
    _CONFIRM_PAYMENT,
    _t(
        A.DEVELOPER_CONFIRM, {S.PAYMENT_CONFIRMED, S.PENDING_DEVELOPER_DOCS},
        S.AWAITING_BUYER_CONFIRMATION, {R.DEVELOPER}, "developer_confirmed_at",
        "Handover not in a state that allows developer confirmation",
    ),
    _t(
        A.BUYER_CONFIRM, {S.AWAITING_BUYER_CONFIRMATION}, S.COMPLETED, {R.BUYER},
        "buyer_confirmed_at", "Developer must confirm handover before the buyer",
    ),
)

TRANSITION_TABLES: Dict[HandoverType, Tuple[Transition, ...]] = {
    HandoverType.SALE: _SALE_TRANSITIONS,
    HandoverType.LONG_TERM_RENTAL: _RENTAL_TRANSITIONS,
    HandoverType.SHORT_TERM_RENTAL: _RENTAL_TRANSITIONS,
}

# Timestamps that must all be set before a handover may complete
OBLIGATIONS: Dict[HandoverType, Tuple[str, ...]] = {
    HandoverType.SALE: (
        "documents_verified_at",
        "keys_released_at",
        "buyer_signed_at",
        "keys_delivered_at",
    ),
    HandoverType.LONG_TERM_RENTAL: ("developer_confirmed_at",),
    HandoverType.SHORT_TERM_RENTAL: ("developer_confirmed_at",),
}

# Stamped by the completing transition itself rather than required beforehand
_STAMPED_ON_COMPLETION = {"buyer_confirmed_at", "completed_at"}


class HandoverStateMachine:
    """Validates handover transitions for one handover type."""

    def __init__(self, handover_type: HandoverType):
        self.handover_type = HandoverType(handover_type)
        self._transitions = {t.action: t for t in TRANSITION_TABLES[self.handover_type]}

    def transition_for(self, action: HandoverAction) -> Transition:
        """Return the transition for an action, or raise if this flow has none."""
        transition = self._transitions.get(HandoverAction(action))
        if transition is None:
            raise ValidationError(
                f"Action '{HandoverAction(action).value}' is not part of the "
                f"{self.handover_type.value} handover flow"
            )
        return transition

    def next_status(
        self,
        current: HandoverStatus,
        action: HandoverAction,
        role: Optional[ActorRole] = None,
    ) -> HandoverStatus:
        """
        Compute the status an action leads to.

        Args:
            current: Current handover status
            action: Requested action
            role: Role of the acting user (None skips the role check)

        Returns:
            Target status

        Raises:
            ValidationError: Action unknown for this flow or not allowed from current
            ForbiddenError: Role may not trigger this action
        """
        current = HandoverStatus(current)
        transition = self.transition_for(action)

        if role is not None and ActorRole(role) not in transition.roles:
            raise ForbiddenError(
                f"Role '{ActorRole(role).value}' cannot perform '{transition.action.value}'"
            )
        if current == HandoverStatus.COMPLETED:
            raise ValidationError("Handover is already completed")
        if current not in transition.sources:
            raise ValidationError(transition.error)
        return transition.target

    def allowed_actions(self, current: HandoverStatus) -> List[HandoverAction]:
        """Actions that are valid from the given status."""
        current = HandoverStatus(current)
        return [t.action for t in self._transitions.values() if current in t.sources]

    @staticmethod
    def is_terminal(status: HandoverStatus) -> bool:
        return HandoverStatus(status) == HandoverStatus.COMPLETED

    @property
    def obligations(self) -> Tuple[str, ...]:
        return OBLIGATIONS[self.handover_type]

    @property
    def completion_action(self) -> HandoverAction:
        if self.handover_type == HandoverType.SALE:
            return HandoverAction.COMPLETE
        return HandoverAction.BUYER_CONFIRM

    def missing_obligations(self, handover: Any) -> List[str]:
        """Obligation timestamp fields that are not yet set on the handover."""
        return [name for name in self.obligations if getattr(handover, name, None) is None]

    def check_completion(self, handover: Any) -> None:
        """Raise ValidationError unless every obligation timestamp is set."""
        missing = self.missing_obligations(handover)
        if missing:
            raise ValidationError(
                "Cannot complete handover: obligations not met "
                f"(missing {', '.join(missing)})"
            )

    def is_completion(self, action: HandoverAction) -> bool:
        return self.transition_for(action).target == HandoverStatus.COMPLETED


def stage_timestamp_fields() -> FrozenSet[str]:
    """Every timestamp column any transition stamps."""
    fields = {
        t.timestamp_field
        for table in TRANSITION_TABLES.values()
        for t in table
    }
    return frozenset(fields | _STAMPED_ON_COMPLETION)
