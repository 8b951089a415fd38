"""Campaign trash handling and donation bookkeeping against the database"""

from decimal import Decimal

import pytest
import pytest_asyncio

from acme_csr.application.dtos.donation_dtos import DonationCreateDTO, DonationProcessDTO
from acme_csr.application.use_cases.campaign_use_cases import (
    DeleteCampaignUseCase,
    GetCampaignUseCase,
    ListCampaignsUseCase,
    RestoreCampaignUseCase,
)
from acme_csr.application.use_cases.donation_use_cases import (
    CompleteDonationUseCase,
    CreateDonationUseCase,
    ProcessDonationUseCase,
)
from acme_csr.domain.enums import CampaignStatus, PaymentMethod, UserRole
from acme_csr.domain.exceptions import CampaignException, DonationException
from acme_csr.domain.repositories.audit_repository import AuditFilters
from acme_csr.domain.repositories.campaign_repository import CampaignFilters
from acme_csr.domain.value_objects.pagination import PageRequest

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest_asyncio.fixture
async def setup(make_organization, make_user, make_campaign):
    organization = await make_organization()
    manager = await make_user("manager@example.com", UserRole.MANAGER, organization.id)
    employee = await make_user("employee@example.com", UserRole.EMPLOYEE, organization.id)
    admin = await make_user("admin@example.com", UserRole.ADMIN)
    campaign = await make_campaign(organization.id, manager.id, goal="500")
    return {"organization": organization, "manager": manager, "employee": employee, "admin": admin, "campaign": campaign}


async def _ids(uow_factory, **filters):
    page = await ListCampaignsUseCase(uow_factory()).execute(CampaignFilters(**filters), PageRequest(), "en")
    return {item.id for item in page.items}


class TestCampaignTrash:

    async def test_soft_deleted_campaign_is_hidden(self, uow_factory, setup):
        campaign = setup["campaign"]

        assert await DeleteCampaignUseCase(uow_factory()).execute(campaign.id.value, setup["manager"])

        with pytest.raises(CampaignException) as exc_info:
            await GetCampaignUseCase(uow_factory()).execute(campaign.id.value, "en")
        assert exc_info.value.status_code == 404
        assert campaign.id.value not in await _ids(uow_factory)
        assert campaign.id.value in await _ids(uow_factory, only_trashed=True)
        assert campaign.id.value in await _ids(uow_factory, with_trashed=True)

    async def test_restore_brings_campaign_back(self, uow_factory, setup):
        campaign = setup["campaign"]
        await DeleteCampaignUseCase(uow_factory()).execute(campaign.id.value, setup["manager"])

        restored = await RestoreCampaignUseCase(uow_factory()).execute(campaign.id.value, setup["admin"], "en")

        assert restored.deleted_at is None
        assert campaign.id.value in await _ids(uow_factory)

    async def test_restore_requires_trashed_campaign(self, uow_factory, setup):
        with pytest.raises(CampaignException):
            await RestoreCampaignUseCase(uow_factory()).execute(setup["campaign"].id.value, setup["admin"], "en")

    async def test_force_delete_removes_row(self, uow_factory, setup):
        campaign = setup["campaign"]

        await DeleteCampaignUseCase(uow_factory()).execute(campaign.id.value, setup["admin"], force=True)

        assert campaign.id.value not in await _ids(uow_factory, with_trashed=True)

    async def test_force_delete_needs_moderation_rights(self, uow_factory, setup):
        other = setup["employee"]

        with pytest.raises(CampaignException) as exc_info:
            await DeleteCampaignUseCase(uow_factory()).execute(setup["campaign"].id.value, other, force=True)
        assert exc_info.value.code == "campaign_forbidden"

    async def test_delete_is_audited(self, uow_factory, setup):
        campaign = setup["campaign"]
        await DeleteCampaignUseCase(uow_factory()).execute(campaign.id.value, setup["manager"])

        uow = uow_factory()
        async with uow:
            page = await uow.audit_logs.list(AuditFilters(entity_type="campaign"), PageRequest())
        assert any(entry.action.endswith("deleted") for entry in page.items)


class TestDonationBookkeeping:

    async def _donate(self, uow_factory, setup, amount="100.00"):
        request = DonationCreateDTO(
            campaign_id=setup["campaign"].id.value,
            amount=Decimal(amount),
            payment_method=PaymentMethod.CARD,
        )
        return await CreateDonationUseCase(uow_factory()).execute(request, setup["employee"])

    async def test_pending_donation_is_not_counted(self, uow_factory, setup):
        await self._donate(uow_factory, setup)

        campaign = await GetCampaignUseCase(uow_factory()).execute(setup["campaign"].id.value, "en")

        assert campaign.donations_count == 0
        assert campaign.current_amount.amount == Decimal("0.00")

    async def test_completed_donation_updates_campaign(self, uow_factory, setup):
        donation = await self._donate(uow_factory, setup)
        await ProcessDonationUseCase(uow_factory()).execute(donation.id, DonationProcessDTO(transaction_id="tx-1"), setup["employee"])

        completed = await CompleteDonationUseCase(uow_factory()).execute(donation.id)

        campaign = await GetCampaignUseCase(uow_factory()).execute(setup["campaign"].id.value, "en")
        assert completed.status == "completed"
        assert campaign.donations_count == 1
        assert campaign.current_amount.amount == Decimal("100.00")

    async def test_reaching_goal_completes_campaign(self, uow_factory, setup):
        donation = await self._donate(uow_factory, setup, amount="500.00")
        await ProcessDonationUseCase(uow_factory()).execute(donation.id, DonationProcessDTO(transaction_id="tx-2"), setup["employee"])
        await CompleteDonationUseCase(uow_factory()).execute(donation.id)

        campaign = await GetCampaignUseCase(uow_factory()).execute(setup["campaign"].id.value, "en")

        assert campaign.status.value == CampaignStatus.COMPLETED.value
        assert campaign.progress_percentage == 100

    async def test_currency_must_match_campaign(self, uow_factory, setup):
        request = DonationCreateDTO(
            campaign_id=setup["campaign"].id.value,
            amount=Decimal("10"),
            currency="USD",
            payment_method=PaymentMethod.CARD,
        )

        with pytest.raises(DonationException):
            await CreateDonationUseCase(uow_factory()).execute(request, setup["employee"])

    async def test_draft_campaign_refuses_donations(self, uow_factory, make_campaign, setup):
        draft = await make_campaign(setup["organization"].id, setup["manager"].id, active=False)
        request = DonationCreateDTO(campaign_id=draft.id.value, amount=Decimal("10"), payment_method=PaymentMethod.CARD)

        with pytest.raises(CampaignException) as exc_info:
            await CreateDonationUseCase(uow_factory()).execute(request, setup["employee"])
        assert exc_info.value.code == "campaign_not_accepting_donations"
