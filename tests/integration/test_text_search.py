"""Database text search over translatable JSON columns"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from acme_csr.domain.entities.campaign import Campaign
from acme_csr.domain.entities.organization import Organization
from acme_csr.domain.enums import UserRole
from acme_csr.domain.repositories.campaign_repository import CampaignFilters
from acme_csr.domain.value_objects.money import Money
from acme_csr.domain.value_objects.pagination import PageRequest
from acme_csr.domain.value_objects.translatable import TranslatableText

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


async def _add_campaign(uow_factory, organization_id, user_id, title):
    now = datetime.utcnow()
    campaign = Campaign.create(
        title=TranslatableText(title),
        description=TranslatableText({"en": "Meals for neighbours"}),
        goal_amount=Money(Decimal("800"), "EUR"),
        start_date=now - timedelta(days=1),
        end_date=now + timedelta(days=30),
        organization_id=organization_id,
        user_id=user_id,
    )
    uow = uow_factory()
    async with uow:
        await uow.campaigns.add(campaign)
        await uow.commit()
    return campaign


async def _campaign_titles(uow_factory, search):
    uow = uow_factory()
    async with uow:
        page = await uow.campaigns.list(CampaignFilters(search=search), PageRequest())
    return [campaign.title.get("fr") for campaign in page.items]


@pytest.mark.parametrize("term", ["solidaire", "Café", "café sol", "Straße", "助学"])
async def test_campaign_search_matches_accented_and_cjk_terms(uow_factory, make_organization, make_user, term):
    organization = await make_organization()
    owner = await make_user("owner@example.com", UserRole.MANAGER, organization.id)
    await _add_campaign(uow_factory, organization.id, owner.id, {"en": "Solidarity café", "fr": "Café solidaire", "de": "Straße der Hilfe", "zh": "助学计划"})
    await _add_campaign(uow_factory, organization.id, owner.id, {"en": "Winter coats", "fr": "Manteaux d'hiver"})

    assert await _campaign_titles(uow_factory, term) == ["Café solidaire"]


async def test_organization_search_matches_accented_names(uow_factory):
    organization = Organization.create(name=TranslatableText({"en": "Crèche Élan"}))
    uow = uow_factory()
    async with uow:
        await uow.organizations.add(organization)
        await uow.commit()

    uow = uow_factory()
    async with uow:
        page = await uow.organizations.list(PageRequest(), search="Élan")

    assert [found.id for found in page.items] == [organization.id]
