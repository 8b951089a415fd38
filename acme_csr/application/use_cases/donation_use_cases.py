"""Donation use cases"""

import logging
from typing import Optional
from uuid import UUID

from ...domain.entities.donation import Donation
from ...domain.entities.user import User
from ...domain.enums import DonationStatus, Permission
from ...domain.exceptions import CampaignException, DonationException
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import CampaignId, DonationId
from ...domain.value_objects.money import Money
from ...domain.value_objects.pagination import Page, PageRequest
from ..dtos.donation_dtos import DonationCancelDTO, DonationCreateDTO, DonationDTO, DonationProcessDTO, DonationReasonDTO
from ..services.audit_service import AuditService

logger = logging.getLogger(__name__)


async def _get_donation(unit_of_work: IUnitOfWork, donation_id) -> Donation:
    donation = await unit_of_work.donations.get_by_id(DonationId.coerce(donation_id))
    if not donation:
        raise DonationException.not_found(donation_id)
    return donation


def _can_manage(user: User) -> bool:
    return user.has_permission(Permission.MANAGE_DONATIONS)


def _authorize(donation: Donation, user: User) -> None:
    if donation.user_id != user.id and not _can_manage(user):
        raise DonationException.not_found(donation.id.value)


def _page(result: Page, user: User) -> Page[DonationDTO]:
    hide = not _can_manage(user)
    return Page(
        items=[DonationDTO.from_entity(donation, hide_donor=hide and donation.user_id != user.id) for donation in result.items],
        total=result.total,
        page=result.page,
        per_page=result.per_page,
    )


class CreateDonationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: DonationCreateDTO, donor: User) -> DonationDTO:
        async with self.unit_of_work:
            if not donor.is_active or not donor.role.can_make_donations():
                raise DonationException.not_allowed_to_donate()

            campaign = await self.unit_of_work.campaigns.get_by_id(CampaignId(request.campaign_id))
            if not campaign:
                raise CampaignException.not_found(request.campaign_id)
            if not campaign.can_accept_donation():
                raise CampaignException.cannot_accept_donation(request.campaign_id)

            currency = (request.currency or campaign.goal_amount.currency).upper()
            if currency != campaign.goal_amount.currency:
                raise DonationException.currency_mismatch(campaign.goal_amount.currency, currency)

            donation = Donation.create(
                campaign_id=campaign.id,
                user_id=donor.id,
                amount=Money(request.amount, currency),
                payment_method=request.payment_method,
                anonymous=request.anonymous,
                recurring=request.recurring,
                recurring_frequency=request.recurring_frequency,
                notes=request.notes,
                payment_gateway=request.payment_gateway,
            )
            await self.unit_of_work.donations.add(donation)
            await AuditService(self.unit_of_work).log_donation_action(
                "created", donation.id,
                new_values={"campaign_id": str(campaign.id), "amount": str(donation.amount.amount), "currency": currency},
            )
            self.unit_of_work.collect(donation)
            await self.unit_of_work.commit()

            logger.info(f"Donation created: {donation.id}", extra={"campaign_id": str(campaign.id)})
            return DonationDTO.from_entity(donation)


class ProcessDonationUseCase:
    """The payment was handed to the gateway"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, donation_id: UUID, request: DonationProcessDTO, user: User) -> DonationDTO:
        async with self.unit_of_work:
            donation = await _get_donation(self.unit_of_work, donation_id)
            _authorize(donation, user)
            existing = await self.unit_of_work.donations.get_by_transaction_id(request.transaction_id)
            if existing and existing.id != donation.id:
                raise DonationException.invalid_status_transition(donation.status, DonationStatus.PROCESSING)
            donation.process(request.transaction_id)
            await self.unit_of_work.donations.update(donation)
            await AuditService(self.unit_of_work).log_donation_action(
                "processed", donation.id, {"status": DonationStatus.PENDING.value},
                {"status": donation.status.value, "transaction_id": request.transaction_id},
            )
            await self.unit_of_work.commit()
            return DonationDTO.from_entity(donation)


class CompleteDonationUseCase:
    """Confirms payment and adds the amount to the campaign total"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, donation_id: UUID, user: Optional[User] = None) -> DonationDTO:
        async with self.unit_of_work:
            donation = await _get_donation(self.unit_of_work, donation_id)
            if user is not None and not _can_manage(user):
                raise DonationException.not_found(donation_id)
            campaign = await self.unit_of_work.campaigns.get_by_id(donation.campaign_id)
            if not campaign:
                raise CampaignException.not_found(donation.campaign_id.value)

            previous = donation.status
            donation.complete()
            campaign.add_donation(donation.amount)
            await self.unit_of_work.donations.update(donation)
            await self.unit_of_work.campaigns.update(campaign)
            await AuditService(self.unit_of_work).log_donation_action(
                "completed", donation.id, {"status": previous.value}, {"status": donation.status.value}
            )
            self.unit_of_work.collect(donation, campaign)
            await self.unit_of_work.commit()

            logger.info(f"Donation completed: {donation.id}", extra={"campaign_id": str(campaign.id)})
            return DonationDTO.from_entity(donation)


class FailDonationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, donation_id: UUID, request: DonationReasonDTO, user: Optional[User] = None) -> DonationDTO:
        async with self.unit_of_work:
            donation = await _get_donation(self.unit_of_work, donation_id)
            if user is not None and not _can_manage(user):
                raise DonationException.not_found(donation_id)
            previous = donation.status
            donation.fail(request.reason)
            await self.unit_of_work.donations.update(donation)
            await AuditService(self.unit_of_work).log_donation_action(
                "failed", donation.id, {"status": previous.value},
                {"status": donation.status.value, "reason": request.reason},
            )
            self.unit_of_work.collect(donation)
            await self.unit_of_work.commit()
            return DonationDTO.from_entity(donation)


class CancelDonationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, donation_id: UUID, request: DonationCancelDTO, user: User) -> DonationDTO:
        async with self.unit_of_work:
            donation = await _get_donation(self.unit_of_work, donation_id)
            _authorize(donation, user)
            previous = donation.status
            donation.cancel(request.reason)
            await self.unit_of_work.donations.update(donation)
            await AuditService(self.unit_of_work).log_donation_action(
                "cancelled", donation.id, {"status": previous.value}, {"status": donation.status.value}
            )
            await self.unit_of_work.commit()
            return DonationDTO.from_entity(donation)


class RefundDonationUseCase:
    """Refunds within the window and subtracts the amount from the campaign"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, donation_id: UUID, request: DonationReasonDTO, user: User) -> DonationDTO:
        async with self.unit_of_work:
            donation = await _get_donation(self.unit_of_work, donation_id)
            if not _can_manage(user):
                raise DonationException.not_found(donation_id)
            campaign = await self.unit_of_work.campaigns.get_by_id(donation.campaign_id, with_trashed=True)

            donation.refund(request.reason)
            if campaign is not None:
                campaign.remove_donation(donation.amount)
                await self.unit_of_work.campaigns.update(campaign)
            await self.unit_of_work.donations.update(donation)
            await AuditService(self.unit_of_work).log_donation_action(
                "refunded", donation.id, {"status": DonationStatus.COMPLETED.value},
                {"status": donation.status.value, "reason": request.reason},
            )
            self.unit_of_work.collect(donation)
            await self.unit_of_work.commit()
            return DonationDTO.from_entity(donation)


class GetDonationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, donation_id: UUID, user: User) -> DonationDTO:
        async with self.unit_of_work:
            donation = await _get_donation(self.unit_of_work, donation_id)
            _authorize(donation, user)
            return DonationDTO.from_entity(donation)


class ListMyDonationsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user: User, page: PageRequest) -> Page[DonationDTO]:
        async with self.unit_of_work:
            return _page(await self.unit_of_work.donations.list_by_user(user.id, page), user)


class ListCampaignDonationsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, campaign_id: UUID, user: User, page: PageRequest, status: Optional[DonationStatus] = None) -> Page[DonationDTO]:
        async with self.unit_of_work:
            campaign = await self.unit_of_work.campaigns.get_by_id(CampaignId.coerce(campaign_id))
            if not campaign:
                raise CampaignException.not_found(campaign_id)
            # Donors outside the managers only see completed donations
            if not _can_manage(user) and not campaign.is_owned_by(user.id):
                status = DonationStatus.COMPLETED
            return _page(await self.unit_of_work.donations.list_by_campaign(campaign.id, page, status), user)


class ListDonationsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user: User, page: PageRequest, status: Optional[DonationStatus] = None) -> Page[DonationDTO]:
        async with self.unit_of_work:
            if not _can_manage(user):
                raise DonationException.not_found(None)
            return _page(await self.unit_of_work.donations.list(page, status), user)
