"""Tests for the handover state machine.

The machine is pure: these tests never touch the database.
"""

from types import SimpleNamespace

import pytest

from core.errors import ForbiddenError, ValidationError
from core.handover import (
    ActorRole,
    HandoverAction,
    HandoverStateMachine,
    HandoverStatus,
    HandoverType,
)
from core.handover.state_machine import stage_timestamp_fields

S = HandoverStatus
A = HandoverAction
R = ActorRole

SALE_PATH = [
    (A.CONFIRM_PAYMENT, R.ADMIN, S.PENDING_DEVELOPER_DOCS),
    (A.SUBMIT_DOCUMENTS, R.DEVELOPER, S.DOCS_SUBMITTED),
    (A.VERIFY_DOCUMENTS, R.ADMIN, S.DOCS_VERIFIED),
    (A.RELEASE_KEYS, R.DEVELOPER, S.KEYS_RELEASED),
    (A.REACH_SIGN, R.ADMIN, S.REACH_SIGNED),
    (A.BUYER_SIGN, R.BUYER, S.BUYER_SIGNED),
    (A.DELIVER_KEYS, R.BUYER, S.KEYS_DELIVERED),
    (A.COMPLETE, R.ADMIN, S.COMPLETED),
]


@pytest.fixture
def sale() -> HandoverStateMachine:
    return HandoverStateMachine(HandoverType.SALE)


@pytest.fixture
def rental() -> HandoverStateMachine:
    return HandoverStateMachine(HandoverType.LONG_TERM_RENTAL)


class TestHandoverType:
    """Listing type to handover type mapping."""

    @pytest.mark.parametrize("listing_type,expected", [
        ("sale", HandoverType.SALE),
        ("rent", HandoverType.LONG_TERM_RENTAL),
        ("short_let", HandoverType.SHORT_TERM_RENTAL),
        (None, HandoverType.SHORT_TERM_RENTAL),
    ])
    def test_from_listing_type(self, listing_type, expected):
        assert HandoverType.from_listing_type(listing_type) == expected


class TestSaleFlow:
    """Signature chain for sales."""

    def test_full_path(self, sale):
        status = S.PAYMENT_CONFIRMED
        for action, role, expected in SALE_PATH:
            status = sale.next_status(status, action, role)
            assert status == expected
        assert sale.is_terminal(status)

    def test_documents_from_payment_confirmed(self, sale):
        """Developers may submit documents before admin confirms payment."""
        assert sale.next_status(S.PAYMENT_CONFIRMED, A.SUBMIT_DOCUMENTS, R.DEVELOPER) == S.DOCS_SUBMITTED

    def test_submit_documents_wrong_state(self, sale):
        with pytest.raises(ValidationError, match="document submission"):
            sale.next_status(S.DOCS_VERIFIED, A.SUBMIT_DOCUMENTS, R.DEVELOPER)

    def test_cannot_skip_verification(self, sale):
        with pytest.raises(ValidationError):
            sale.next_status(S.DOCS_SUBMITTED, A.RELEASE_KEYS, R.DEVELOPER)

    def test_complete_before_delivery(self, sale):
        with pytest.raises(ValidationError, match="obligations not met"):
            sale.next_status(S.BUYER_SIGNED, A.COMPLETE, R.ADMIN)

    def test_completed_is_terminal(self, sale):
        with pytest.raises(ValidationError, match="already completed"):
            sale.next_status(S.COMPLETED, A.COMPLETE, R.ADMIN)
        assert sale.allowed_actions(S.COMPLETED) == []

    def test_rental_action_not_in_sale_flow(self, sale):
        with pytest.raises(ValidationError, match="not part of the sale"):
            sale.next_status(S.PAYMENT_CONFIRMED, A.DEVELOPER_CONFIRM, R.DEVELOPER)

    def test_allowed_actions(self, sale):
        assert set(sale.allowed_actions(S.PAYMENT_CONFIRMED)) == {A.CONFIRM_PAYMENT, A.SUBMIT_DOCUMENTS}
        assert sale.allowed_actions(S.KEYS_DELIVERED) == [A.COMPLETE]


class TestRoles:
    """Role checks on transitions."""

    def test_buyer_cannot_verify(self, sale):
        with pytest.raises(ForbiddenError):
            sale.next_status(S.DOCS_SUBMITTED, A.VERIFY_DOCUMENTS, R.BUYER)

    def test_creator_cannot_act(self, sale):
        for action, _, _ in SALE_PATH:
            with pytest.raises(ForbiddenError):
                sale.next_status(S.PAYMENT_CONFIRMED, action, R.CREATOR)

    def test_forbidden_is_a_validation_error(self, sale):
        with pytest.raises(ValidationError):
            sale.next_status(S.DOCS_SUBMITTED, A.VERIFY_DOCUMENTS, R.DEVELOPER)

    def test_admin_may_deliver_keys(self, sale):
        assert sale.next_status(S.BUYER_SIGNED, A.DELIVER_KEYS, R.ADMIN) == S.KEYS_DELIVERED

    def test_role_optional(self, sale):
        assert sale.next_status(S.DOCS_SUBMITTED, A.VERIFY_DOCUMENTS) == S.DOCS_VERIFIED


class TestRentalFlow:
    """Two-party confirmation for rentals."""

    def test_full_path(self, rental):
        status = rental.next_status(S.PAYMENT_CONFIRMED, A.DEVELOPER_CONFIRM, R.DEVELOPER)
        assert status == S.AWAITING_BUYER_CONFIRMATION
        assert rental.next_status(status, A.BUYER_CONFIRM, R.BUYER) == S.COMPLETED

    def test_buyer_cannot_confirm_first(self, rental):
        with pytest.raises(ValidationError):
            rental.next_status(S.PAYMENT_CONFIRMED, A.BUYER_CONFIRM, R.BUYER)

    def test_sale_actions_rejected(self, rental):
        with pytest.raises(ValidationError):
            rental.next_status(S.PAYMENT_CONFIRMED, A.SUBMIT_DOCUMENTS, R.DEVELOPER)

    def test_completion_action(self, sale, rental):
        assert sale.completion_action == A.COMPLETE
        assert rental.completion_action == A.BUYER_CONFIRM
        assert HandoverStateMachine(HandoverType.SHORT_TERM_RENTAL).completion_action == A.BUYER_CONFIRM

    def test_is_completion(self, sale, rental):
        assert sale.is_completion(A.COMPLETE)
        assert not sale.is_completion(A.DELIVER_KEYS)
        assert rental.is_completion(A.BUYER_CONFIRM)
        assert not rental.is_completion(A.DEVELOPER_CONFIRM)

    def test_is_completion_foreign_action(self, sale):
        with pytest.raises(ValidationError):
            sale.is_completion(A.BUYER_CONFIRM)


class TestObligations:
    """Completion guard on obligation timestamps."""

    def test_sale_obligations(self, sale):
        assert sale.obligations == (
            "documents_verified_at",
            "keys_released_at",
            "buyer_signed_at",
            "keys_delivered_at",
        )

    def test_missing_obligations(self, sale):
        handover = SimpleNamespace(
            documents_verified_at="t", keys_released_at="t", buyer_signed_at=None, keys_delivered_at=None,
        )
        assert sale.missing_obligations(handover) == ["buyer_signed_at", "keys_delivered_at"]
        with pytest.raises(ValidationError, match="obligations not met"):
            sale.check_completion(handover)

    def test_all_obligations_met(self, sale):
        handover = SimpleNamespace(
            documents_verified_at="t", keys_released_at="t", buyer_signed_at="t", keys_delivered_at="t",
        )
        sale.check_completion(handover)

    def test_rental_obligations(self, rental):
        assert rental.missing_obligations(SimpleNamespace(developer_confirmed_at=None)) == ["developer_confirmed_at"]

    def test_stage_timestamp_fields(self):
        fields = stage_timestamp_fields()
        assert {"documents_submitted_at", "reach_signed_at", "completed_at", "buyer_confirmed_at"} <= fields
        assert "status" not in fields
