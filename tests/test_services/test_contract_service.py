"""Tests for ContractService.

Covers generation, the developer signature, the Reach countersignature
and who may read a contract.
"""

from decimal import Decimal

import pytest

from config.constants import CONTRACT_HANDOVER_DOCUMENTS, NOTIFY_CONTRACT_EXECUTED, NOTIFY_CONTRACT_GENERATED
from core.errors import ForbiddenError, NotFoundError, ValidationError
from database.models import ContractStatus
from services import ContractService


class TestGenerateContract:
    """Tests for generate_contract."""

    @pytest.mark.asyncio
    async def test_generate(
        self, contract_service: ContractService, notification_service, sale_property, developer, admin
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)

        assert contract.status == ContractStatus.PENDING_DEVELOPER_SIGNATURE
        assert contract.developer_id == developer.id
        assert Decimal(contract.terms["asking_price"]) == Decimal("1000000.00")
        assert Decimal(contract.terms["platform_fee_percent"]) == Decimal("5.0")
        assert contract.terms["creator_commission_percent_by_tier"]["Professional"] == "2.5"
        assert contract.terms["document_handover_obligations"] == list(CONTRACT_HANDOVER_DOCUMENTS)

        kinds = [n.kind for n in await notification_service.list_for_user(developer.id)]
        assert NOTIFY_CONTRACT_GENERATED in kinds

    @pytest.mark.asyncio
    async def test_generate_is_idempotent(self, contract_service: ContractService, sale_property, admin):
        first = await contract_service.generate_contract(sale_property.id, admin)
        second = await contract_service.generate_contract(sale_property.id, admin)
        assert second.id == first.id

    @pytest.mark.asyncio
    async def test_rental_rejected(self, contract_service: ContractService, rental_property, admin):
        with pytest.raises(ValidationError, match="sale listings"):
            await contract_service.generate_contract(rental_property.id, admin)

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, contract_service: ContractService, sale_property, developer):
        with pytest.raises(ForbiddenError):
            await contract_service.generate_contract(sale_property.id, developer)

    @pytest.mark.asyncio
    async def test_unknown_property(self, contract_service: ContractService, admin):
        with pytest.raises(NotFoundError, match="Property not found"):
            await contract_service.generate_contract(9999, admin)


class TestContractSigning:
    """Tests for the developer signature and Reach countersignature."""

    @pytest.mark.asyncio
    async def test_full_lifecycle(
        self, contract_service: ContractService, notification_service, signer,
        sale_property, developer, admin,
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)

        signed = await contract_service.sign_as_developer(contract.id, developer, ip_address="102.89.1.7")
        assert signed.status == ContractStatus.SIGNED_BY_DEVELOPER
        assert signed.developer_ip_address == "102.89.1.7"
        assert signer.verify(
            signed.developer_signature, f"contract-{contract.id}", developer.id,
            "developer", signed.developer_signed_at,
        )

        executed = await contract_service.countersign(contract.id, admin)
        assert executed.is_executed
        assert executed.reach_admin_id == admin.id
        assert contract_service.verify_signatures(executed)

        kinds = [n.kind for n in await notification_service.list_for_user(developer.id)]
        assert NOTIFY_CONTRACT_EXECUTED in kinds

    @pytest.mark.asyncio
    async def test_tampered_signature_fails_verification(
        self, contract_service: ContractService, sale_property, developer, admin
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)
        await contract_service.sign_as_developer(contract.id, developer)
        executed = await contract_service.countersign(contract.id, admin)

        executed.developer_signature = "0" * 64
        assert not contract_service.verify_signatures(executed)

    @pytest.mark.asyncio
    async def test_other_developer_forbidden(
        self, contract_service: ContractService, user_repo, sale_property, admin
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)
        other = await user_repo.create("developer", "Other Builders", "other@builders.ng")
        with pytest.raises(ForbiddenError):
            await contract_service.sign_as_developer(contract.id, other)

    @pytest.mark.asyncio
    async def test_admin_cannot_sign_as_developer(
        self, contract_service: ContractService, sale_property, admin
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)
        with pytest.raises(ForbiddenError):
            await contract_service.sign_as_developer(contract.id, admin)

    @pytest.mark.asyncio
    async def test_developer_signs_once(
        self, contract_service: ContractService, sale_property, developer, admin
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)
        await contract_service.sign_as_developer(contract.id, developer)
        with pytest.raises(ValidationError, match="not in a state"):
            await contract_service.sign_as_developer(contract.id, developer)

    @pytest.mark.asyncio
    async def test_countersign_before_developer(
        self, contract_service: ContractService, sale_property, admin
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)
        with pytest.raises(ValidationError, match="signed by developer first"):
            await contract_service.countersign(contract.id, admin)

    @pytest.mark.asyncio
    async def test_countersign_requires_admin(
        self, contract_service: ContractService, sale_property, developer, admin
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)
        await contract_service.sign_as_developer(contract.id, developer)
        with pytest.raises(ForbiddenError):
            await contract_service.countersign(contract.id, developer)

    @pytest.mark.asyncio
    async def test_countersign_twice_rejected(
        self, contract_service: ContractService, sale_property, developer, admin
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)
        await contract_service.sign_as_developer(contract.id, developer)
        await contract_service.countersign(contract.id, admin)
        with pytest.raises(ValidationError):
            await contract_service.countersign(contract.id, admin)

    @pytest.mark.asyncio
    async def test_unknown_contract(self, contract_service: ContractService, developer, admin):
        with pytest.raises(NotFoundError, match="Contract not found"):
            await contract_service.sign_as_developer(9999, developer)
        with pytest.raises(NotFoundError):
            await contract_service.countersign(9999, admin)


class TestContractAccess:
    """Tests for get_contract visibility."""

    @pytest.mark.asyncio
    async def test_developer_and_admin_can_read(
        self, contract_service: ContractService, sale_property, developer, admin
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)
        assert (await contract_service.get_contract(contract.id, developer)).id == contract.id
        assert (await contract_service.get_contract(contract.id, admin)).id == contract.id

    @pytest.mark.asyncio
    async def test_buyer_with_handover_can_read(
        self, contract_service: ContractService, purchase_service, make_payment,
        sale_property, buyer, admin,
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)
        await purchase_service.complete_property_purchase(make_payment(sale_property, buyer))

        assert (await contract_service.get_contract(contract.id, buyer)).id == contract.id

    @pytest.mark.asyncio
    async def test_stranger_forbidden(
        self, contract_service: ContractService, sale_property, buyer, admin
    ):
        contract = await contract_service.generate_contract(sale_property.id, admin)
        # No purchase, so no handover for this buyer
        with pytest.raises(ForbiddenError):
            await contract_service.get_contract(contract.id, buyer)
