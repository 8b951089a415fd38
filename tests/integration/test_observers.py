"""ORM listeners: donation counters and cache invalidation on commit"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

from acme_csr.application.dtos.donation_dtos import DonationCreateDTO, DonationProcessDTO
from acme_csr.application.use_cases.donation_use_cases import (
    CompleteDonationUseCase,
    CreateDonationUseCase,
    ProcessDonationUseCase,
)
from acme_csr.domain.entities.category import Category
from acme_csr.domain.entities.organization import Organization
from acme_csr.domain.enums import PaymentMethod, UserRole
from acme_csr.domain.value_objects.translatable import TranslatableText
from acme_csr.infrastructure import observers
from acme_csr.infrastructure.orm import CategoryModel, DonationModel

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest.fixture
def invalidator():
    previous = observers._cache_invalidator
    invalidator = MagicMock(return_value=1)
    observers.set_cache_invalidator(invalidator)
    yield invalidator
    observers.set_cache_invalidator(previous)


@pytest_asyncio.fixture
async def people(make_organization, make_user):
    organization = await make_organization(is_verified=True)
    owner = await make_user("owner@example.com", UserRole.MANAGER, organization.id)
    donor = await make_user("donor@example.com", UserRole.EMPLOYEE, organization.id)
    return owner, donor


async def _completed_donation(uow_factory, campaign, user):
    donation = await CreateDonationUseCase(uow_factory()).execute(
        DonationCreateDTO(campaign_id=campaign.id.value, amount=Decimal("25.00"), payment_method=PaymentMethod.CARD),
        user,
    )
    await ProcessDonationUseCase(uow_factory()).execute(donation.id, DonationProcessDTO(transaction_id=f"tx-{donation.id}"), user)
    await CompleteDonationUseCase(uow_factory()).execute(donation.id)
    return donation


async def _donations_count(uow_factory, campaign):
    uow = uow_factory()
    async with uow:
        return (await uow.campaigns.get_by_id(campaign.id)).donations_count


class TestDonationCounter:

    async def test_completed_donations_are_counted(self, uow_factory, make_campaign, people):
        owner, donor = people
        campaign = await make_campaign(owner.organization_id, owner.id)

        await _completed_donation(uow_factory, campaign, donor)

        assert await _donations_count(uow_factory, campaign) == 1

    async def test_moving_a_donation_recounts_both_campaigns(self, uow_factory, make_campaign, people):
        owner, donor = people
        source = await make_campaign(owner.organization_id, owner.id)
        target = await make_campaign(owner.organization_id, owner.id)
        donation = await _completed_donation(uow_factory, source, donor)

        uow = uow_factory()
        async with uow:
            model = uow.session.get(DonationModel, donation.id)
            model.campaign_id = target.id.value
            await uow.commit()

        assert await _donations_count(uow_factory, source) == 0
        assert await _donations_count(uow_factory, target) == 1


class TestCacheInvalidation:

    async def test_commit_invalidates_the_changed_models_patterns(self, uow_factory, invalidator):
        uow = uow_factory()
        async with uow:
            await uow.categories.add(Category.create(name=TranslatableText({"en": "Health"})))
            await uow.commit()

        invalidator.assert_called_once_with(sorted(observers.INVALIDATION_PATTERNS[CategoryModel]))

    async def test_rollback_discards_pending_patterns(self, uow_factory, invalidator):
        uow = uow_factory()
        async with uow:
            await uow.organizations.add(Organization.create(name=TranslatableText({"en": "Ghost Org"})))
            await uow.rollback()

            await uow.categories.add(Category.create(name=TranslatableText({"en": "Health"})))
            await uow.commit()

        patterns = invalidator.call_args.args[0]
        assert "organization_stats" not in patterns
        assert "campaign_categories" in patterns

    async def test_rollback_alone_invalidates_nothing(self, uow_factory, invalidator):
        uow = uow_factory()
        async with uow:
            await uow.organizations.add(Organization.create(name=TranslatableText({"en": "Ghost Org"})))
            await uow.rollback()

        invalidator.assert_not_called()

    async def test_invalidator_errors_do_not_break_the_commit(self, uow_factory, invalidator):
        invalidator.side_effect = ConnectionError("redis down")

        uow = uow_factory()
        async with uow:
            await uow.categories.add(Category.create(name=TranslatableText({"en": "Health"})))
            await uow.commit()

        uow = uow_factory()
        async with uow:
            assert await uow.categories.get_by_slug("health") is not None
