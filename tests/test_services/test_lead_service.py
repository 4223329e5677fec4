"""Tests for LeadService."""

import pytest

from core.errors import NotFoundError, ValidationError
from services import LeadService


class TestLeads:
    """Lead recording and attribution."""

    @pytest.mark.asyncio
    async def test_record_attributed_lead(self, lead_service: LeadService, sale_property, buyer, creator):
        code = LeadService.generate_tracking_code(creator.id, sale_property.id)
        lead = await lead_service.record_lead(sale_property.id, buyer.id, creator.id, code)

        assert lead.creator_id == creator.id
        assert lead.tracking_code == code
        assert await lead_service.get_attributed_creator(sale_property.id, buyer.id) == creator.id

    @pytest.mark.asyncio
    async def test_unattributed_lead(self, lead_service: LeadService, sale_property, buyer):
        await lead_service.record_lead(sale_property.id, buyer.id)
        assert await lead_service.get_attributed_creator(sale_property.id, buyer.id) is None

    @pytest.mark.asyncio
    async def test_latest_creator_wins(self, lead_service: LeadService, user_repo, sale_property, buyer, creator):
        other = await user_repo.create("creator", "Kemi Vlogs")
        await lead_service.record_lead(sale_property.id, buyer.id, creator.id)
        await lead_service.record_lead(sale_property.id, buyer.id, other.id)
        await lead_service.record_lead(sale_property.id, buyer.id)

        assert await lead_service.get_attributed_creator(sale_property.id, buyer.id) == other.id

    @pytest.mark.asyncio
    async def test_tracking_codes_unique(self):
        codes = {LeadService.generate_tracking_code(1, 1) for _ in range(50)}
        assert len(codes) == 50
        assert all(len(c) == 16 for c in codes)

    @pytest.mark.asyncio
    async def test_unknown_property(self, lead_service: LeadService, buyer):
        with pytest.raises(NotFoundError, match="Property"):
            await lead_service.record_lead(9999, buyer.id)

    @pytest.mark.asyncio
    async def test_non_creator_rejected(self, lead_service: LeadService, sale_property, buyer, developer):
        with pytest.raises(ValidationError):
            await lead_service.record_lead(sale_property.id, buyer.id, developer.id)

    @pytest.mark.asyncio
    async def test_unknown_creator(self, lead_service: LeadService, sale_property, buyer):
        with pytest.raises(NotFoundError, match="Creator"):
            await lead_service.record_lead(sale_property.id, buyer.id, 9999)

    @pytest.mark.asyncio
    async def test_list_creator_leads(
        self, lead_service: LeadService, sale_property, rental_property, buyer, creator
    ):
        await lead_service.record_lead(sale_property.id, buyer.id, creator.id)
        await lead_service.record_lead(rental_property.id, buyer.id, creator.id)
        await lead_service.record_lead(rental_property.id, buyer.id)

        leads = await lead_service.list_creator_leads(creator.id)
        assert [l.property_id for l in leads] == [rental_property.id, sale_property.id]
