"""Campaign use cases"""

import logging
from typing import Optional
from uuid import UUID

from ...domain.entities.campaign import Campaign
from ...domain.entities.user import User
from ...domain.enums import Permission
from ...domain.exceptions import CampaignException, CategoryException, OrganizationException, TeamException
from ...domain.repositories.campaign_repository import CampaignFilters
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import CampaignId, CategoryId, OrganizationId, TeamId
from ...domain.value_objects.money import Money
from ...domain.value_objects.pagination import Page, PageRequest
from ..dtos.campaign_dtos import CampaignCreateDTO, CampaignDTO, CampaignRejectDTO, CampaignUpdateDTO
from ..dtos.common import to_translatable
from ..services.audit_service import AuditService

logger = logging.getLogger(__name__)


async def _get_campaign(unit_of_work: IUnitOfWork, campaign_id, with_trashed: bool = False) -> Campaign:
    campaign = await unit_of_work.campaigns.get_by_id(CampaignId.coerce(campaign_id), with_trashed=with_trashed)
    if not campaign:
        raise CampaignException.not_found(campaign_id)
    return campaign


def can_manage_campaign(campaign: Campaign, user: User) -> bool:
    return campaign.is_owned_by(user.id) or user.has_permission(Permission.MANAGE_CAMPAIGNS)


def _authorize(campaign: Campaign, user: User) -> None:
    if not can_manage_campaign(campaign, user):
        raise CampaignException.unauthorized_access(campaign.id.value)


def _authorize_moderation(campaign: Campaign, user: User) -> None:
    if not user.has_permission(Permission.MANAGE_CAMPAIGNS):
        raise CampaignException.unauthorized_access(campaign.id.value)


def _snapshot(campaign: Campaign) -> dict:
    return {
        "title": campaign.title.to_dict(),
        "status": campaign.status.value,
        "goal_amount": str(campaign.goal_amount.amount),
        "start_date": campaign.start_date,
        "end_date": campaign.end_date,
    }


async def _check_references(unit_of_work: IUnitOfWork, category_id: Optional[UUID], team_id: Optional[UUID]) -> None:
    if category_id and not await unit_of_work.categories.get_by_id(CategoryId(category_id)):
        raise CategoryException.not_found(category_id)
    if team_id and not await unit_of_work.teams.get_by_id(TeamId(team_id)):
        raise TeamException.not_found(team_id)


class CreateCampaignUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: CampaignCreateDTO, user: User, locale: str) -> CampaignDTO:
        async with self.unit_of_work:
            if not user.role.can_create_campaigns():
                raise CampaignException.unauthorized_access(None)

            organization_id = OrganizationId(request.organization_id) if request.organization_id else user.organization_id
            if organization_id is None:
                raise OrganizationException.not_found(None)
            organization = await self.unit_of_work.organizations.get_by_id(organization_id)
            if not organization:
                raise OrganizationException.not_found(organization_id.value)
            if not organization.can_create_campaigns():
                raise CampaignException.organization_cannot_create(organization_id.value)

            await _check_references(self.unit_of_work, request.category_id, request.team_id)

            campaign = Campaign.create(
                title=to_translatable(request.title, locale),
                description=to_translatable(request.description or "", locale),
                goal_amount=Money(request.goal_amount, request.currency),
                start_date=request.start_date,
                end_date=request.end_date,
                organization_id=organization_id,
                user_id=user.id,
                category_id=CategoryId(request.category_id) if request.category_id else None,
                team_id=TeamId(request.team_id) if request.team_id else None,
                featured_image=request.featured_image,
            )
            await self.unit_of_work.campaigns.add(campaign)
            await AuditService(self.unit_of_work).log_campaign_action("created", campaign.id, new_values=_snapshot(campaign))
            self.unit_of_work.collect(campaign)
            await self.unit_of_work.commit()

            logger.info(f"Campaign created: {campaign.id}", extra={"organization_id": str(organization_id)})
            return CampaignDTO.from_entity(campaign, locale)


class UpdateCampaignUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, campaign_id: UUID, request: CampaignUpdateDTO, user: User, locale: str) -> CampaignDTO:
        async with self.unit_of_work:
            campaign = await _get_campaign(self.unit_of_work, campaign_id)
            _authorize(campaign, user)
            if campaign.status.is_final():
                raise CampaignException.invalid_status_transition(campaign.status, campaign.status)
            await _check_references(self.unit_of_work, request.category_id, request.team_id)

            old_values = _snapshot(campaign)
            campaign.update_details(
                title=to_translatable(request.title, locale),
                description=to_translatable(request.description, locale),
                goal_amount=Money(request.goal_amount, campaign.goal_amount.currency) if request.goal_amount else None,
                start_date=request.start_date,
                end_date=request.end_date,
                category_id=CategoryId(request.category_id) if request.category_id else None,
                team_id=TeamId(request.team_id) if request.team_id else None,
                featured_image=request.featured_image,
            )
            await self.unit_of_work.campaigns.update(campaign)
            await AuditService(self.unit_of_work).log_campaign_action("updated", campaign.id, old_values, _snapshot(campaign))
            self.unit_of_work.collect(campaign)
            await self.unit_of_work.commit()
            return CampaignDTO.from_entity(campaign, locale)


class GetCampaignUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, campaign_id: UUID, locale: str, user: Optional[User] = None) -> CampaignDTO:
        async with self.unit_of_work:
            campaign = await _get_campaign(self.unit_of_work, campaign_id)
            # Unpublished campaigns look missing to everyone but the owner and campaign managers
            if user is not None and not campaign.status.is_public() and not can_manage_campaign(campaign, user):
                raise CampaignException.not_found(campaign_id)
            return CampaignDTO.from_entity(campaign, locale)


class ListCampaignsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, filters: CampaignFilters, page: PageRequest, locale: str) -> Page[CampaignDTO]:
        async with self.unit_of_work:
            result = await self.unit_of_work.campaigns.list(filters, page)
            return Page(
                items=[CampaignDTO.from_entity(campaign, locale) for campaign in result.items],
                total=result.total,
                page=result.page,
                per_page=result.per_page,
            )


class ChangeCampaignStatusUseCase:
    """Owner-driven workflow steps: submit, pause, resume, complete, cancel"""

    ACTIONS = {
        "submit": ("submit_for_approval", "submitted"),
        "draft": ("return_to_draft", "returned_to_draft"),
        "pause": ("pause", "paused"),
        "resume": ("resume", "resumed"),
        "complete": ("complete", "completed"),
        "cancel": ("cancel", "cancelled"),
    }

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, campaign_id: UUID, action: str, user: User, locale: str) -> CampaignDTO:
        if action not in self.ACTIONS:
            raise ValueError(f"Unknown campaign action: {action}")
        method, verb = self.ACTIONS[action]
        async with self.unit_of_work:
            campaign = await _get_campaign(self.unit_of_work, campaign_id)
            _authorize(campaign, user)
            previous = campaign.status
            getattr(campaign, method)()
            await self.unit_of_work.campaigns.update(campaign)
            await AuditService(self.unit_of_work).log_campaign_action(
                verb, campaign.id, {"status": previous.value}, {"status": campaign.status.value}
            )
            self.unit_of_work.collect(campaign)
            await self.unit_of_work.commit()
            return CampaignDTO.from_entity(campaign, locale)


class ApproveCampaignUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, campaign_id: UUID, approver: User, locale: str) -> CampaignDTO:
        async with self.unit_of_work:
            campaign = await _get_campaign(self.unit_of_work, campaign_id)
            _authorize_moderation(campaign, approver)
            previous = campaign.status
            campaign.approve(approver.id)
            await self.unit_of_work.campaigns.update(campaign)
            await AuditService(self.unit_of_work).log_campaign_action(
                "approved", campaign.id, {"status": previous.value}, {"status": campaign.status.value}
            )
            self.unit_of_work.collect(campaign)
            await self.unit_of_work.commit()
            return CampaignDTO.from_entity(campaign, locale)


class RejectCampaignUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, campaign_id: UUID, request: CampaignRejectDTO, rejector: User, locale: str) -> CampaignDTO:
        async with self.unit_of_work:
            campaign = await _get_campaign(self.unit_of_work, campaign_id)
            _authorize_moderation(campaign, rejector)
            previous = campaign.status
            campaign.reject(rejector.id, request.reason)
            await self.unit_of_work.campaigns.update(campaign)
            await AuditService(self.unit_of_work).log_campaign_action(
                "rejected", campaign.id, {"status": previous.value},
                {"status": campaign.status.value, "reason": request.reason},
            )
            self.unit_of_work.collect(campaign)
            await self.unit_of_work.commit()
            return CampaignDTO.from_entity(campaign, locale)


class DeleteCampaignUseCase:
    """Soft delete by default; force removes the row"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, campaign_id: UUID, user: User, force: bool = False) -> bool:
        async with self.unit_of_work:
            campaign = await _get_campaign(self.unit_of_work, campaign_id, with_trashed=force)
            if force:
                _authorize_moderation(campaign, user)
            else:
                _authorize(campaign, user)
            campaign.mark_deleted(permanently=force)
            if force:
                deleted = await self.unit_of_work.campaigns.force_delete(campaign.id)
            else:
                deleted = await self.unit_of_work.campaigns.soft_delete(campaign.id)
            await AuditService(self.unit_of_work).log_campaign_action(
                "force_deleted" if force else "deleted", campaign.id, _snapshot(campaign)
            )
            self.unit_of_work.collect(campaign)
            await self.unit_of_work.commit()
            return deleted


class RestoreCampaignUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, campaign_id: UUID, user: User, locale: str) -> CampaignDTO:
        async with self.unit_of_work:
            campaign = await _get_campaign(self.unit_of_work, campaign_id, with_trashed=True)
            _authorize_moderation(campaign, user)
            campaign.restore()
            await self.unit_of_work.campaigns.restore(campaign.id)
            await AuditService(self.unit_of_work).log_campaign_action("restored", campaign.id)
            self.unit_of_work.collect(campaign)
            await self.unit_of_work.commit()
            return CampaignDTO.from_entity(campaign, locale)


class ExpireCampaignsUseCase:
    """Moves active campaigns past their end date to expired"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self) -> int:
        async with self.unit_of_work:
            campaigns = await self.unit_of_work.campaigns.list_expired_active()
            audit = AuditService(self.unit_of_work)
            for campaign in campaigns:
                campaign.expire()
                await self.unit_of_work.campaigns.update(campaign)
                await audit.log_system_action("campaign_expired", "campaign", campaign.id)
                self.unit_of_work.collect(campaign)
            await self.unit_of_work.commit()
            if campaigns:
                logger.info(f"Expired {len(campaigns)} campaigns")
            return len(campaigns)
