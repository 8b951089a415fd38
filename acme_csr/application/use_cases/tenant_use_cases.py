"""Tenant provisioning and lifecycle use cases"""

import logging
from typing import Callable, List, Optional
from uuid import UUID

from ...core.context import tenant_scope
from ...domain.entities.notification import Notification
from ...domain.entities.tenant import Tenant
from ...domain.entities.user import User
from ...domain.enums import NotificationPriority, NotificationType, TenantStatus, UserRole
from ...domain.exceptions import OrganizationException, TenantException
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import OrganizationId, TenantId
from ...infrastructure.tenancy.resolver import tenant_context_for
from ..dtos.organization_dtos import ProvisioningResultDTO, SuspendTenantDTO, TenantDTO, TenantFeatureDTO
from ..services.audit_service import AuditService

logger = logging.getLogger(__name__)


async def _get_tenant(unit_of_work: IUnitOfWork, tenant_id) -> Tenant:
    tenant = await unit_of_work.tenants.get_by_id(TenantId.coerce(tenant_id))
    if not tenant:
        raise TenantException.not_found(tenant_id)
    return tenant


class ProvisionTenantUseCase:
    """Creates the tenant database, search indexes and first administrator.

    Runs from the central context. Each step that touches the tenant database
    runs inside the tenant's scope so sessions bind to its engine. Any failure
    marks the tenant failed and is re-raised for the job to retry.
    """

    def __init__(self, unit_of_work_factory: Callable[[], IUnitOfWork], provisioner, index_manager):
        self.unit_of_work_factory = unit_of_work_factory
        self.provisioner = provisioner
        self.index_manager = index_manager

    async def execute(self, tenant_id: UUID) -> ProvisioningResultDTO:
        async with self.unit_of_work_factory() as uow:
            tenant = await _get_tenant(uow, tenant_id)
            organization = await uow.organizations.get_by_id(tenant.organization_id)
            if not organization:
                raise OrganizationException.not_found(tenant.organization_id)
            tenant.start_provisioning()
            await uow.tenants.update(tenant)
            await uow.commit()

        logger.info(f"Provisioning tenant {tenant.subdomain}", extra={"tenant_id": str(tenant.id)})
        try:
            self.provisioner.create_database(tenant.database)
            with tenant_scope(tenant_context_for(tenant)):
                admin_email = await self._seed(tenant, organization)
            indexes = await self.index_manager.create_indexes(str(tenant.id))
        except Exception as e:
            logger.error(f"Provisioning failed for tenant {tenant.subdomain}: {e}", extra={"tenant_id": str(tenant.id)})
            await self._mark_failed(tenant.id, str(e))
            raise

        async with self.unit_of_work_factory() as uow:
            tenant = await _get_tenant(uow, tenant.id)
            tenant.mark_provisioned()
            await uow.tenants.update(tenant)
            await AuditService(uow).log_system_action("tenant_provisioned", "tenant", tenant.id, {"subdomain": str(tenant.subdomain)})
            uow.collect(tenant)
            await uow.commit()

        logger.info(f"Tenant {tenant.subdomain} is active", extra={"tenant_id": str(tenant.id)})
        return ProvisioningResultDTO(
            tenant=TenantDTO.from_entity(tenant),
            details={"database": tenant.database, "indexes": sorted(indexes), "admin_email": admin_email},
        )

    async def _seed(self, tenant: Tenant, organization) -> Optional[str]:
        async with self.unit_of_work_factory() as uow:
            if not await uow.organizations.get_by_id(organization.id, with_trashed=True):
                await uow.organizations.add(organization)

            admin = None
            admin_data = tenant.admin_data or {}
            if admin_data.get("email"):
                email = Email(admin_data["email"])
                admin = await uow.users.get_by_email(email)
                if admin is None:
                    admin = User.create(
                        email=email,
                        name=admin_data.get("name") or "Administrator",
                        hashed_password=admin_data["password_hash"],
                        role=UserRole.ADMIN,
                        organization_id=organization.id,
                    )
                    admin.verify_email()
                    await uow.users.add(admin)
                    await uow.notifications.add(Notification.create(
                        notifiable_id=admin.id,
                        type=NotificationType.TENANT_PROVISIONED,
                        title="Your workspace is ready",
                        message=f"{organization.display_name} is now live at {tenant.subdomain}.",
                        priority=NotificationPriority.HIGH,
                        data={"tenant_id": str(tenant.id), "subdomain": str(tenant.subdomain)},
                    ))
            await uow.commit()
            return str(admin.email) if admin else None

    async def _mark_failed(self, tenant_id: TenantId, reason: str) -> None:
        async with self.unit_of_work_factory() as uow:
            tenant = await _get_tenant(uow, tenant_id)
            if tenant.status in (TenantStatus.PENDING, TenantStatus.PROVISIONING):
                tenant.mark_failed(reason[:1000])
                await uow.tenants.update(tenant)
                await AuditService(uow).log_system_action("tenant_provisioning_failed", "tenant", tenant.id, {"reason": reason})
                await uow.commit()


class RetryTenantProvisioningUseCase:
    """Moves a failed tenant back to pending and requests provisioning again"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, tenant_id: UUID) -> TenantDTO:
        async with self.unit_of_work:
            tenant = await _get_tenant(self.unit_of_work, tenant_id)
            tenant.retry()
            await self.unit_of_work.tenants.update(tenant)
            self.unit_of_work.collect(tenant)
            await self.unit_of_work.commit()
            return TenantDTO.from_entity(tenant)


class SuspendTenantUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, tenant_id: UUID, request: SuspendTenantDTO) -> TenantDTO:
        async with self.unit_of_work:
            tenant = await _get_tenant(self.unit_of_work, tenant_id)
            tenant.suspend(request.reason)
            await self.unit_of_work.tenants.update(tenant)
            await AuditService(self.unit_of_work).log(
                "tenant.suspended", "tenant", str(tenant.id), {"status": TenantStatus.ACTIVE.value},
                {"status": tenant.status.value, "reason": request.reason},
            )
            self.unit_of_work.collect(tenant)
            await self.unit_of_work.commit()
            logger.warning(f"Tenant {tenant.subdomain} suspended: {request.reason}", extra={"tenant_id": str(tenant.id)})
            return TenantDTO.from_entity(tenant)


class ReactivateTenantUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, tenant_id: UUID) -> TenantDTO:
        async with self.unit_of_work:
            tenant = await _get_tenant(self.unit_of_work, tenant_id)
            tenant.reactivate()
            await self.unit_of_work.tenants.update(tenant)
            await AuditService(self.unit_of_work).log(
                "tenant.reactivated", "tenant", str(tenant.id), {"status": TenantStatus.SUSPENDED.value},
                {"status": tenant.status.value},
            )
            await self.unit_of_work.commit()
            return TenantDTO.from_entity(tenant)


class SetTenantFeatureUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, tenant_id: UUID, request: TenantFeatureDTO) -> TenantDTO:
        async with self.unit_of_work:
            tenant = await _get_tenant(self.unit_of_work, tenant_id)
            if request.enabled:
                tenant.enable_feature(request.feature)
            else:
                tenant.disable_feature(request.feature)
            await self.unit_of_work.tenants.update(tenant)
            await self.unit_of_work.commit()
            return TenantDTO.from_entity(tenant)


class GetTenantUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, tenant_id: UUID) -> TenantDTO:
        async with self.unit_of_work:
            return TenantDTO.from_entity(await _get_tenant(self.unit_of_work, tenant_id))


class ListTenantsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, status: Optional[TenantStatus] = None) -> List[TenantDTO]:
        async with self.unit_of_work:
            return [TenantDTO.from_entity(tenant) for tenant in await self.unit_of_work.tenants.list(status)]


class GetOrganizationTenantUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, organization_id: UUID) -> TenantDTO:
        async with self.unit_of_work:
            tenant = await self.unit_of_work.tenants.get_by_organization_id(OrganizationId.coerce(organization_id))
            if not tenant:
                raise TenantException.not_found(organization_id)
            return TenantDTO.from_entity(tenant)
