"""Tests for ContractRepository."""

import sqlite3

import pytest
import pytest_asyncio

from database.models import ContractStatus
from database.repositories import ContractRepository
from utils.time import utcnow


@pytest_asyncio.fixture
async def contract(contract_repo: ContractRepository, sale_property):
    return await contract_repo.create(
        sale_property.id, sale_property.developer_id, {"asking_price": "1000000.00"}
    )


class TestContractRepository:
    """Test suite for ContractRepository."""

    @pytest.mark.asyncio
    async def test_create(self, contract, sale_property):
        assert contract.status == ContractStatus.PENDING_DEVELOPER_SIGNATURE
        assert contract.property_id == sale_property.id
        assert contract.terms == {"asking_price": "1000000.00"}
        assert contract.developer_signature is None
        assert not contract.is_executed

    @pytest.mark.asyncio
    async def test_one_contract_per_property(self, contract_repo: ContractRepository, contract):
        with pytest.raises(sqlite3.IntegrityError):
            await contract_repo.create(contract.property_id, contract.developer_id, {})

    @pytest.mark.asyncio
    async def test_lookups(self, contract_repo: ContractRepository, contract):
        assert (await contract_repo.get_by_property(contract.property_id)).id == contract.id
        assert await contract_repo.get_by_id(9999) is None
        assert await contract_repo.get_by_property(9999) is None

    @pytest.mark.asyncio
    async def test_signature_order(self, contract_repo: ContractRepository, contract, admin):
        now = utcnow()
        # Reach cannot countersign first
        assert await contract_repo.record_reach_signature(contract.id, admin.id, "a" * 64, now) is False

        assert await contract_repo.record_developer_signature(contract.id, "d" * 64, now, "10.0.0.1") is True
        assert await contract_repo.record_developer_signature(contract.id, "d" * 64, now) is False

        signed = await contract_repo.get_by_id(contract.id)
        assert signed.status == ContractStatus.SIGNED_BY_DEVELOPER
        assert signed.developer_ip_address == "10.0.0.1"
        assert signed.developer_signed_at == now

        assert await contract_repo.record_reach_signature(contract.id, admin.id, "a" * 64, now) is True
        assert await contract_repo.record_reach_signature(contract.id, admin.id, "a" * 64, now) is False

        executed = await contract_repo.get_by_id(contract.id)
        assert executed.is_executed
        assert executed.reach_admin_id == admin.id
