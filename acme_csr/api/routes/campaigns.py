"""Campaign routes"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_current_user, get_locale, get_pagination, get_unit_of_work, paginated
from ...application.dtos.campaign_dtos import CampaignCreateDTO, CampaignDTO, CampaignStatusDTO, CampaignUpdateDTO
from ...application.dtos.common import MessageResponse
from ...application.use_cases.campaign_use_cases import (
    ChangeCampaignStatusUseCase,
    CreateCampaignUseCase,
    DeleteCampaignUseCase,
    GetCampaignUseCase,
    ListCampaignsUseCase,
    UpdateCampaignUseCase,
)
from ...application.use_cases.donation_use_cases import ListCampaignDonationsUseCase
from ...domain.entities.user import User
from ...domain.enums import CampaignStatus, DonationStatus, Permission
from ...domain.repositories.campaign_repository import SORTABLE_FIELDS, CampaignFilters
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import CategoryId, OrganizationId
from ...domain.value_objects.pagination import PageRequest

router = APIRouter()

SORT_PATTERN = "^-?(" + "|".join(SORTABLE_FIELDS) + ")$"


@router.get("/statuses", response_model=List[CampaignStatusDTO])
async def list_statuses():
    """Campaign statuses with their labels and colors"""
    return [CampaignStatusDTO.from_status(campaign_status) for campaign_status in CampaignStatus]


@router.get("")
async def list_campaigns(
    status_filter: Optional[List[CampaignStatus]] = Query(None, alias="status"),
    category_id: Optional[UUID] = None,
    organization_id: Optional[UUID] = None,
    search: Optional[str] = Query(None, max_length=255),
    sort: str = Query("-created_at", pattern=SORT_PATTERN),
    mine: bool = False,
    page: PageRequest = Depends(get_pagination),
    locale: str = Depends(get_locale),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """List campaigns; people without campaign management rights only see public ones unless listing their own"""
    statuses = tuple(status_filter or ())
    if not mine and not current_user.has_permission(Permission.MANAGE_CAMPAIGNS):
        statuses = tuple(s for s in statuses if s.is_public()) or CampaignStatus.public_statuses()
    filters = CampaignFilters(
        statuses=statuses,
        organization_id=OrganizationId(organization_id) if organization_id else None,
        category_id=CategoryId(category_id) if category_id else None,
        user_id=current_user.id if mine else None,
        search=search,
        sort=sort,
    )
    return paginated(await ListCampaignsUseCase(unit_of_work).execute(filters, page, locale))


@router.post("", response_model=CampaignDTO, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    request: CampaignCreateDTO,
    locale: str = Depends(get_locale),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Create a draft campaign"""
    return await CreateCampaignUseCase(unit_of_work).execute(request, current_user, locale)


@router.get("/{campaign_id}", response_model=CampaignDTO)
async def get_campaign(
    campaign_id: UUID,
    locale: str = Depends(get_locale),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetCampaignUseCase(unit_of_work).execute(campaign_id, locale, current_user)


@router.put("/{campaign_id}", response_model=CampaignDTO)
async def update_campaign(
    campaign_id: UUID,
    request: CampaignUpdateDTO,
    locale: str = Depends(get_locale),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Update a campaign (owner or campaign managers)"""
    return await UpdateCampaignUseCase(unit_of_work).execute(campaign_id, request, current_user, locale)


@router.post("/{campaign_id}/{action}", response_model=CampaignDTO)
async def change_campaign_status(
    campaign_id: UUID,
    action: str,
    locale: str = Depends(get_locale),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Workflow actions: submit, draft, pause, resume, complete, cancel"""
    return await ChangeCampaignStatusUseCase(unit_of_work).execute(campaign_id, action, current_user, locale)


@router.delete("/{campaign_id}", response_model=MessageResponse)
async def delete_campaign(
    campaign_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Move a campaign to the trash"""
    await DeleteCampaignUseCase(unit_of_work).execute(campaign_id, current_user)
    return MessageResponse(message="Campaign moved to trash")


@router.get("/{campaign_id}/donations")
async def list_campaign_donations(
    campaign_id: UUID,
    status_filter: Optional[DonationStatus] = Query(None, alias="status"),
    page: PageRequest = Depends(get_pagination),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    result = await ListCampaignDonationsUseCase(unit_of_work).execute(campaign_id, current_user, page, status_filter)
    return paginated(result)



