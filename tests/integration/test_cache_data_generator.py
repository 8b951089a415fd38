"""Widget payloads computed from the SQLite schema"""

from decimal import Decimal

import pytest
import pytest_asyncio

from acme_csr.application.services.cache_data_generator import CacheDataGenerator
from acme_csr.domain.enums import UserRole
from acme_csr.domain.value_objects.cache import CacheKey
from acme_csr.infrastructure.orm import CampaignModel

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest_asyncio.fixture
async def owner(make_organization, make_user):
    organization = await make_organization(is_verified=True)
    return await make_user("owner@example.com", UserRole.MANAGER, organization.id)


async def _set_raised(uow_factory, campaign, amount):
    uow = uow_factory()
    async with uow:
        uow.session.query(CampaignModel).filter(CampaignModel.id == campaign.id.value).update(
            {"current_amount": Decimal(amount)}
        )
        await uow.commit()


async def test_active_raised_covers_every_active_campaign(uow_factory, make_campaign, owner):
    for _ in range(7):
        campaign = await make_campaign(owner.organization_id, owner.id)
        await _set_raised(uow_factory, campaign, "10.00")
    draft = await make_campaign(owner.organization_id, owner.id, active=False)
    await _set_raised(uow_factory, draft, "500.00")

    performance = await CacheDataGenerator(uow_factory).generate(CacheKey("campaign_performance"))

    assert performance["active_campaigns"] == 7
    assert performance["active_raised"] == 70.0
    assert len(performance["top_campaigns"]) == 5


async def test_raised_by_status_defaults_to_zero(uow_factory, make_campaign, owner):
    campaign = await make_campaign(owner.organization_id, owner.id)
    await _set_raised(uow_factory, campaign, "42.50")

    uow = uow_factory()
    async with uow:
        raised = await uow.stats.raised_by_campaign_status()

    assert raised["active"] == 42.5
    assert raised["draft"] == 0.0
