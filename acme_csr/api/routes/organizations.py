"""Organization routes"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_current_user, get_locale, get_pagination, get_unit_of_work, paginated
from ...application.dtos.organization_dtos import OrganizationDTO, OrganizationStatsDTO, OrganizationUpdateDTO
from ...application.use_cases.organization_use_cases import (
    GetOrganizationStatsUseCase,
    GetOrganizationUseCase,
    ListOrganizationsUseCase,
    UpdateOrganizationUseCase,
)
from ...domain.entities.user import User
from ...domain.enums import Permission
from ...domain.exceptions import OrganizationException
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.pagination import PageRequest

router = APIRouter()


@router.get("")
async def list_organizations(
    search: Optional[str] = Query(None, max_length=255),
    verified: Optional[bool] = None,
    page: PageRequest = Depends(get_pagination),
    locale: str = Depends(get_locale),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """List active organizations"""
    result = await ListOrganizationsUseCase(unit_of_work).execute(page, locale, search=search, verified=verified, active=True)
    return paginated(result)


@router.get("/{organization_id}", response_model=OrganizationDTO)
async def get_organization(
    organization_id: UUID,
    locale: str = Depends(get_locale),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetOrganizationUseCase(unit_of_work).execute(organization_id, locale)


@router.put("/{organization_id}", response_model=OrganizationDTO)
async def update_organization(
    organization_id: UUID,
    request: OrganizationUpdateDTO,
    locale: str = Depends(get_locale),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Update an organization profile (its own managers or organization admins)"""
    _require_member_or_admin(current_user, organization_id)
    return await UpdateOrganizationUseCase(unit_of_work).execute(organization_id, request, locale)


@router.get("/{organization_id}/stats", response_model=OrganizationStatsDTO)
async def get_organization_stats(
    organization_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    _require_member_or_admin(current_user, organization_id)
    return await GetOrganizationStatsUseCase(unit_of_work).execute(organization_id)


def _require_member_or_admin(user: User, organization_id: UUID) -> None:
    if user.has_permission(Permission.MANAGE_ORGANIZATIONS):
        return
    if user.organization_id and user.organization_id.value == organization_id and user.has_permission(Permission.VIEW_ANALYTICS):
        return
    raise OrganizationException.forbidden()
