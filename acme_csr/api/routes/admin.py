"""Admin routes"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import (
    get_cache_repository,
    get_current_admin_user,
    get_job_queue,
    get_locale,
    get_pagination,
    get_unit_of_work,
    get_warming_tracker,
    paginated,
    require_permission,
)
from ...application.dtos.audit_dtos import AuditLogDTO, AuditStatsDTO
from ...application.dtos.cache_dtos import (
    CacheRecommendationsDTO,
    CacheStatusDTO,
    CacheWarmJobDTO,
    CacheWarmJobStatusDTO,
    CacheWarmRequestDTO,
)
from ...application.dtos.campaign_dtos import CampaignDTO, CampaignRejectDTO
from ...application.dtos.category_dtos import CategoryCreateDTO, CategoryDTO, CategoryUpdateDTO
from ...application.dtos.common import MessageResponse
from ...application.dtos.currency_dtos import CurrencyDTO
from ...application.dtos.notification_dtos import NotificationCreateDTO, NotificationDTO
from ...application.dtos.organization_dtos import (
    OrganizationCreateDTO,
    OrganizationDTO,
    SuspendTenantDTO,
    TenantDTO,
    TenantFeatureDTO,
)
from ...application.dtos.user_dtos import ChangeRoleDTO, SuspendUserDTO, UserDTO
from ...application.use_cases.audit_use_cases import (
    GetAuditStatsUseCase,
    GetEntityHistoryUseCase,
    GetUserAuditTrailUseCase,
    ListAuditLogsUseCase,
)
from ...application.use_cases.cache_use_cases import (
    ClearCacheUseCase,
    GetCacheRecommendationsUseCase,
    GetCacheStatusUseCase,
    GetCacheWarmingJobUseCase,
    GetDashboardWidgetsUseCase,
    StartCacheWarmingUseCase,
)
from ...application.use_cases.campaign_use_cases import (
    ApproveCampaignUseCase,
    DeleteCampaignUseCase,
    ListCampaignsUseCase,
    RejectCampaignUseCase,
    RestoreCampaignUseCase,
)
from ...application.use_cases.category_use_cases import (
    CreateCategoryUseCase,
    DeleteCategoryUseCase,
    ListCategoriesUseCase,
    SetCategoryStatusUseCase,
    UpdateCategoryUseCase,
)
from ...application.use_cases.currency_use_cases import ListCurrenciesUseCase, SetDefaultCurrencyUseCase
from ...application.use_cases.notification_use_cases import CreateNotificationUseCase
from ...application.use_cases.organization_use_cases import (
    ChangeOrganizationStateUseCase,
    CreateOrganizationUseCase,
    DeleteOrganizationUseCase,
    ListOrganizationsUseCase,
    RestoreOrganizationUseCase,
)
from ...application.use_cases.tenant_use_cases import (
    GetOrganizationTenantUseCase,
    GetTenantUseCase,
    ListTenantsUseCase,
    ReactivateTenantUseCase,
    RetryTenantProvisioningUseCase,
    SetTenantFeatureUseCase,
    SuspendTenantUseCase,
)
from ...application.use_cases.user_use_cases import (
    ActivateUserUseCase,
    ChangeUserRoleUseCase,
    ListUsersUseCase,
    SuspendUserUseCase,
)
from ...domain.entities.user import User
from ...domain.enums import CampaignStatus, Permission, TenantStatus, UserRole
from ...domain.repositories.audit_repository import AuditFilters
from ...domain.repositories.campaign_repository import CampaignFilters
from ...domain.repositories.job_queue import IJobQueue
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import OrganizationId, UserId
from ...domain.value_objects.pagination import PageRequest
from ...infrastructure.cache.redis_cache_repository import RedisCacheRepository
from ...infrastructure.cache.warming_job_tracker import WarmingJobTracker

router = APIRouter()


# Dashboard

@router.get("/dashboard")
async def get_admin_dashboard(
    admin_user: User = Depends(require_permission(Permission.VIEW_ANALYTICS)),
    cache_repository: RedisCacheRepository = Depends(get_cache_repository)
):
    """Dashboard widgets, served from the cache and computed on a miss"""
    return {"widgets": await GetDashboardWidgetsUseCase(cache_repository).execute()}


# Campaign moderation

@router.get("/campaigns")
async def list_all_campaigns(
    status_filter: Optional[List[CampaignStatus]] = Query(None, alias="status"),
    organization_id: Optional[UUID] = None,
    search: Optional[str] = Query(None, max_length=255),
    trashed: bool = False,
    page: PageRequest = Depends(get_pagination),
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_CAMPAIGNS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Every campaign regardless of status; `trashed=true` lists the trash"""
    filters = CampaignFilters(
        statuses=tuple(status_filter or ()),
        organization_id=OrganizationId(organization_id) if organization_id else None,
        search=search,
        only_trashed=trashed,
    )
    return paginated(await ListCampaignsUseCase(unit_of_work).execute(filters, page, locale))


@router.get("/campaigns/pending")
async def list_pending_campaigns(
    page: PageRequest = Depends(get_pagination),
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_CAMPAIGNS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Campaigns waiting for approval, oldest first"""
    filters = CampaignFilters(statuses=(CampaignStatus.PENDING_APPROVAL,), sort="created_at")
    return paginated(await ListCampaignsUseCase(unit_of_work).execute(filters, page, locale))


@router.post("/campaigns/{campaign_id}/approve", response_model=CampaignDTO)
async def approve_campaign(
    campaign_id: UUID,
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_CAMPAIGNS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await ApproveCampaignUseCase(unit_of_work).execute(campaign_id, admin_user, locale)


@router.post("/campaigns/{campaign_id}/reject", response_model=CampaignDTO)
async def reject_campaign(
    campaign_id: UUID,
    request: CampaignRejectDTO,
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_CAMPAIGNS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Send a pending campaign back to draft with a reason"""
    return await RejectCampaignUseCase(unit_of_work).execute(campaign_id, request, admin_user, locale)


@router.post("/campaigns/{campaign_id}/restore", response_model=CampaignDTO)
async def restore_campaign(
    campaign_id: UUID,
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_CAMPAIGNS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await RestoreCampaignUseCase(unit_of_work).execute(campaign_id, admin_user, locale)


@router.delete("/campaigns/{campaign_id}/force", response_model=MessageResponse)
async def force_delete_campaign(
    campaign_id: UUID,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Permanently delete a campaign"""
    await DeleteCampaignUseCase(unit_of_work).execute(campaign_id, admin_user, force=True)
    return MessageResponse(message="Campaign permanently deleted")


# Organizations

@router.get("/organizations")
async def list_all_organizations(
    search: Optional[str] = Query(None, max_length=255),
    verified: Optional[bool] = None,
    active: Optional[bool] = None,
    page: PageRequest = Depends(get_pagination),
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_ORGANIZATIONS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    result = await ListOrganizationsUseCase(unit_of_work).execute(page, locale, search=search, verified=verified, active=active)
    return paginated(result)


@router.post("/organizations", response_model=OrganizationDTO, status_code=status.HTTP_201_CREATED)
async def create_organization(
    request: OrganizationCreateDTO,
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_ORGANIZATIONS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Register an organization; a subdomain requests a tenant to be provisioned"""
    return await CreateOrganizationUseCase(unit_of_work).execute(request, locale)


@router.post("/organizations/{organization_id}/restore", response_model=OrganizationDTO)
async def restore_organization(
    organization_id: UUID,
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_ORGANIZATIONS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await RestoreOrganizationUseCase(unit_of_work).execute(organization_id, locale)


@router.post("/organizations/{organization_id}/{action}", response_model=OrganizationDTO)
async def change_organization_state(
    organization_id: UUID,
    action: str,
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_ORGANIZATIONS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """verify, unverify, activate or deactivate"""
    return await ChangeOrganizationStateUseCase(unit_of_work).execute(organization_id, action, locale)


@router.delete("/organizations/{organization_id}", response_model=MessageResponse)
async def delete_organization(
    organization_id: UUID,
    admin_user: User = Depends(require_permission(Permission.MANAGE_ORGANIZATIONS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    await DeleteOrganizationUseCase(unit_of_work).execute(organization_id)
    return MessageResponse(message="Organization deleted")


@router.get("/organizations/{organization_id}/tenant", response_model=TenantDTO)
async def get_organization_tenant(
    organization_id: UUID,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetOrganizationTenantUseCase(unit_of_work).execute(organization_id)


# Users

@router.get("/users")
async def list_users(
    organization_id: Optional[UUID] = None,
    role: Optional[UserRole] = None,
    search: Optional[str] = Query(None, max_length=255),
    page: PageRequest = Depends(get_pagination),
    admin_user: User = Depends(require_permission(Permission.MANAGE_USERS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return paginated(await ListUsersUseCase(unit_of_work).execute(page, organization_id, role, search))


@router.put("/users/{user_id}/role", response_model=UserDTO)
async def change_user_role(
    user_id: UUID,
    request: ChangeRoleDTO,
    admin_user: User = Depends(require_permission(Permission.MANAGE_USERS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Change a user's role; only super admins grant admin roles"""
    return await ChangeUserRoleUseCase(unit_of_work).execute(user_id, request, admin_user)


@router.post("/users/{user_id}/suspend", response_model=UserDTO)
async def suspend_user(
    user_id: UUID,
    request: SuspendUserDTO,
    admin_user: User = Depends(require_permission(Permission.MANAGE_USERS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await SuspendUserUseCase(unit_of_work).execute(user_id, request, admin_user)


@router.post("/users/{user_id}/activate", response_model=UserDTO)
async def activate_user(
    user_id: UUID,
    admin_user: User = Depends(require_permission(Permission.MANAGE_USERS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await ActivateUserUseCase(unit_of_work).execute(user_id)


# Categories and currencies

@router.get("/categories", response_model=List[CategoryDTO])
async def list_all_categories(
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await ListCategoriesUseCase(unit_of_work).execute(locale, active_only=False)


@router.post("/categories", response_model=CategoryDTO, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CategoryCreateDTO,
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await CreateCategoryUseCase(unit_of_work).execute(request, locale)


@router.put("/categories/{category_id}", response_model=CategoryDTO)
async def update_category(
    category_id: UUID,
    request: CategoryUpdateDTO,
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await UpdateCategoryUseCase(unit_of_work).execute(category_id, request, locale)


@router.post("/categories/{category_id}/activate", response_model=CategoryDTO)
async def activate_category(
    category_id: UUID,
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await SetCategoryStatusUseCase(unit_of_work).execute(category_id, True, locale)


@router.post("/categories/{category_id}/deactivate", response_model=CategoryDTO)
async def deactivate_category(
    category_id: UUID,
    locale: str = Depends(get_locale),
    admin_user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await SetCategoryStatusUseCase(unit_of_work).execute(category_id, False, locale)


@router.delete("/categories/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: UUID,
    admin_user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Delete a category that no campaign uses"""
    await DeleteCategoryUseCase(unit_of_work).execute(category_id)
    return MessageResponse(message="Category deleted")


@router.get("/currencies", response_model=List[CurrencyDTO])
async def list_all_currencies(
    admin_user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await ListCurrenciesUseCase(unit_of_work).execute(active_only=False)


@router.post("/currencies/{code}/default", response_model=CurrencyDTO)
async def set_default_currency(
    code: str,
    admin_user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await SetDefaultCurrencyUseCase(unit_of_work).execute(code)


@router.post("/currencies/update-rates", response_model=MessageResponse, status_code=status.HTTP_202_ACCEPTED)
async def update_exchange_rates(
    admin_user: User = Depends(require_permission(Permission.MANAGE_SETTINGS)),
    job_queue: IJobQueue = Depends(get_job_queue)
):
    job_queue.enqueue("update_exchange_rates")
    return MessageResponse(message="Exchange rate update queued")


# Notifications

@router.post("/notifications", response_model=NotificationDTO, status_code=status.HTTP_201_CREATED)
async def create_notification(
    request: NotificationCreateDTO,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await CreateNotificationUseCase(unit_of_work).execute(request)


# Tenants

@router.get("/tenants", response_model=List[TenantDTO])
async def list_tenants(
    status_filter: Optional[TenantStatus] = Query(None, alias="status"),
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await ListTenantsUseCase(unit_of_work).execute(status_filter)


@router.get("/tenants/{tenant_id}", response_model=TenantDTO)
async def get_tenant(
    tenant_id: UUID,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetTenantUseCase(unit_of_work).execute(tenant_id)


@router.post("/tenants/{tenant_id}/retry", response_model=TenantDTO, status_code=status.HTTP_202_ACCEPTED)
async def retry_tenant_provisioning(
    tenant_id: UUID,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Queue provisioning again for a failed tenant"""
    return await RetryTenantProvisioningUseCase(unit_of_work).execute(tenant_id)


@router.post("/tenants/{tenant_id}/suspend", response_model=TenantDTO)
async def suspend_tenant(
    tenant_id: UUID,
    request: SuspendTenantDTO,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await SuspendTenantUseCase(unit_of_work).execute(tenant_id, request)


@router.post("/tenants/{tenant_id}/reactivate", response_model=TenantDTO)
async def reactivate_tenant(
    tenant_id: UUID,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await ReactivateTenantUseCase(unit_of_work).execute(tenant_id)


@router.put("/tenants/{tenant_id}/features", response_model=TenantDTO)
async def set_tenant_feature(
    tenant_id: UUID,
    request: TenantFeatureDTO,
    admin_user: User = Depends(get_current_admin_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await SetTenantFeatureUseCase(unit_of_work).execute(tenant_id, request)


# Cache

@router.post("/cache/warm", response_model=CacheWarmJobDTO, status_code=status.HTTP_202_ACCEPTED)
async def warm_cache(
    request: CacheWarmRequestDTO,
    admin_user: User = Depends(require_permission(Permission.MANAGE_SYSTEM)),
    cache_repository: RedisCacheRepository = Depends(get_cache_repository),
    job_queue: IJobQueue = Depends(get_job_queue),
    tracker: WarmingJobTracker = Depends(get_warming_tracker),
    locale: str = Depends(get_locale)
):
    """Queue a warm-up in the request locale; poll `/cache/jobs/{job_id}` for progress"""
    return await StartCacheWarmingUseCase(cache_repository, job_queue, tracker).execute(request, locale)


@router.get("/cache/jobs/{job_id}", response_model=CacheWarmJobStatusDTO)
async def get_cache_warming_job(
    job_id: str,
    admin_user: User = Depends(require_permission(Permission.MANAGE_SYSTEM)),
    tracker: WarmingJobTracker = Depends(get_warming_tracker)
):
    return await GetCacheWarmingJobUseCase(tracker).execute(job_id)


@router.get("/cache/status", response_model=CacheStatusDTO)
async def get_cache_status(
    admin_user: User = Depends(require_permission(Permission.MANAGE_SYSTEM)),
    cache_repository: RedisCacheRepository = Depends(get_cache_repository)
):
    return await GetCacheStatusUseCase(cache_repository).execute()


@router.get("/cache/recommendations", response_model=CacheRecommendationsDTO)
async def get_cache_recommendations(
    admin_user: User = Depends(require_permission(Permission.MANAGE_SYSTEM)),
    cache_repository: RedisCacheRepository = Depends(get_cache_repository)
):
    return await GetCacheRecommendationsUseCase(cache_repository).execute()


@router.delete("/cache", response_model=MessageResponse)
async def clear_cache(
    admin_user: User = Depends(require_permission(Permission.MANAGE_SYSTEM)),
    cache_repository: RedisCacheRepository = Depends(get_cache_repository)
):
    removed = await ClearCacheUseCase(cache_repository).execute()
    return MessageResponse(message=f"Removed {removed} cache entries")


# Audit

@router.get("/audit")
async def list_audit_logs(
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    action: Optional[str] = None,
    user_id: Optional[UUID] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    page: PageRequest = Depends(get_pagination),
    admin_user: User = Depends(require_permission(Permission.VIEW_AUDIT_LOGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    filters = AuditFilters(
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        user_id=UserId(user_id) if user_id else None,
        date_from=date_from,
        date_to=date_to,
    )
    return paginated(await ListAuditLogsUseCase(unit_of_work).execute(filters, page))


@router.get("/audit/stats", response_model=AuditStatsDTO)
async def get_audit_stats(
    days: int = Query(30, ge=1, le=365),
    admin_user: User = Depends(require_permission(Permission.VIEW_AUDIT_LOGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetAuditStatsUseCase(unit_of_work).execute(days)


@router.get("/audit/entities/{entity_type}/{entity_id}", response_model=List[AuditLogDTO])
async def get_entity_history(
    entity_type: str,
    entity_id: str,
    admin_user: User = Depends(require_permission(Permission.VIEW_AUDIT_LOGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Every change recorded for one entity, oldest first"""
    return await GetEntityHistoryUseCase(unit_of_work).execute(entity_type, entity_id)


@router.get("/audit/users/{user_id}")
async def get_user_audit_trail(
    user_id: UUID,
    page: PageRequest = Depends(get_pagination),
    admin_user: User = Depends(require_permission(Permission.VIEW_AUDIT_LOGS)),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return paginated(await GetUserAuditTrailUseCase(unit_of_work).execute(UserId(user_id), page))
