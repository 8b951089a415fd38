"""Organization management use cases"""

import logging
from typing import Optional
from uuid import UUID

from ...core.config import settings
from ...core.security import get_password_hash
from ...domain.entities.organization import Organization
from ...domain.entities.tenant import Tenant
from ...domain.exceptions import OrganizationException
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import OrganizationId
from ...domain.value_objects.pagination import Page, PageRequest
from ...domain.value_objects.slug import Subdomain
from ...domain.value_objects.translatable import TranslatableText
from ..dtos.common import to_translatable
from ..dtos.organization_dtos import (
    OrganizationCreateDTO,
    OrganizationDTO,
    OrganizationStatsDTO,
    OrganizationUpdateDTO,
)
from ..services.audit_service import AuditService

logger = logging.getLogger(__name__)

TRANSLATABLE_FIELDS = ("name", "description", "mission")


async def _get_organization(unit_of_work: IUnitOfWork, organization_id, with_trashed: bool = False) -> Organization:
    organization = await unit_of_work.organizations.get_by_id(OrganizationId.coerce(organization_id), with_trashed=with_trashed)
    if not organization:
        raise OrganizationException.not_found(organization_id)
    return organization


def _snapshot(organization: Organization) -> dict:
    return {
        "name": organization.name.to_dict(),
        "is_active": organization.is_active,
        "is_verified": organization.is_verified,
    }


class CreateOrganizationUseCase:
    """Creates an organization, and its tenant when a subdomain is requested"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: OrganizationCreateDTO, locale: str) -> OrganizationDTO:
        async with self.unit_of_work:
            if request.registration_number and await self.unit_of_work.organizations.get_by_registration_number(request.registration_number):
                raise OrganizationException.duplicate_registration_number(request.registration_number)

            subdomain = Subdomain(request.subdomain) if request.subdomain else None
            if subdomain and (
                await self.unit_of_work.organizations.get_by_subdomain(subdomain.value)
                or await self.unit_of_work.tenants.get_by_subdomain(subdomain.value)
            ):
                raise OrganizationException.duplicate_subdomain(subdomain.value)

            details = request.model_dump(exclude={"name", "description", "mission", "subdomain", "admin"}, exclude_none=True)
            if details.get("email"):
                details["email"] = Email(details["email"])
            organization = Organization.create(
                name=to_translatable(request.name, locale),
                description=to_translatable(request.description, locale) or TranslatableText(),
                mission=to_translatable(request.mission, locale) or TranslatableText(),
                subdomain=subdomain,
                **details,
            )
            await self.unit_of_work.organizations.add(organization)

            tenant = None
            if subdomain:
                admin_data = {}
                if request.admin:
                    admin_data = {
                        "name": request.admin.name,
                        "email": str(request.admin.email),
                        "password_hash": get_password_hash(request.admin.password),
                    }
                tenant = Tenant.create(organization.id, subdomain, settings.TENANT_DATABASE_PREFIX, admin_data)
                await self.unit_of_work.tenants.add(tenant)

            await AuditService(self.unit_of_work).log_organization_action(
                "created", organization.id, new_values={**_snapshot(organization), "subdomain": request.subdomain}
            )
            self.unit_of_work.collect(organization)
            if tenant is not None:
                self.unit_of_work.collect(tenant)
            await self.unit_of_work.commit()

            logger.info(f"Organization created: {organization.id}", extra={"subdomain": request.subdomain})
            return OrganizationDTO.from_entity(organization, locale)


class UpdateOrganizationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, organization_id: UUID, request: OrganizationUpdateDTO, locale: str) -> OrganizationDTO:
        async with self.unit_of_work:
            organization = await _get_organization(self.unit_of_work, organization_id)
            changes = request.model_dump(exclude_unset=True, exclude_none=True)
            for attribute in TRANSLATABLE_FIELDS:
                if attribute in changes:
                    changes[attribute] = to_translatable(changes[attribute], locale)
            if changes.get("email"):
                changes["email"] = Email(changes["email"])
            if changes.get("registration_number") and changes["registration_number"] != organization.registration_number:
                if await self.unit_of_work.organizations.get_by_registration_number(changes["registration_number"]):
                    raise OrganizationException.duplicate_registration_number(changes["registration_number"])

            old_values = _snapshot(organization)
            organization.update_details(**changes)
            await self.unit_of_work.organizations.update(organization)
            await AuditService(self.unit_of_work).log_organization_action(
                "updated", organization.id, old_values, _snapshot(organization)
            )
            self.unit_of_work.collect(organization)
            await self.unit_of_work.commit()
            return OrganizationDTO.from_entity(organization, locale)


class GetOrganizationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, organization_id: UUID, locale: str) -> OrganizationDTO:
        async with self.unit_of_work:
            return OrganizationDTO.from_entity(await _get_organization(self.unit_of_work, organization_id), locale)


class ListOrganizationsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(
        self,
        page: PageRequest,
        locale: str,
        search: Optional[str] = None,
        verified: Optional[bool] = None,
        active: Optional[bool] = None,
    ) -> Page[OrganizationDTO]:
        async with self.unit_of_work:
            result = await self.unit_of_work.organizations.list(page, search=search, verified=verified, active=active)
            return Page(
                items=[OrganizationDTO.from_entity(organization, locale) for organization in result.items],
                total=result.total,
                page=result.page,
                per_page=result.per_page,
            )


class ChangeOrganizationStateUseCase:
    """verify, unverify, activate or deactivate"""

    ACTIONS = {
        "verify": "verified",
        "unverify": "unverified",
        "activate": "activated",
        "deactivate": "deactivated",
    }

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, organization_id: UUID, action: str, locale: str) -> OrganizationDTO:
        if action not in self.ACTIONS:
            raise ValueError(f"Unknown organization action: {action}")
        async with self.unit_of_work:
            organization = await _get_organization(self.unit_of_work, organization_id)
            old_values = _snapshot(organization)
            getattr(organization, action)()
            await self.unit_of_work.organizations.update(organization)
            await AuditService(self.unit_of_work).log_organization_action(
                self.ACTIONS[action], organization.id, old_values, _snapshot(organization)
            )
            self.unit_of_work.collect(organization)
            await self.unit_of_work.commit()
            return OrganizationDTO.from_entity(organization, locale)


class DeleteOrganizationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, organization_id: UUID) -> bool:
        async with self.unit_of_work:
            organization = await _get_organization(self.unit_of_work, organization_id)
            deleted = await self.unit_of_work.organizations.soft_delete(organization.id)
            await AuditService(self.unit_of_work).log_organization_action("deleted", organization.id, _snapshot(organization))
            await self.unit_of_work.commit()
            return deleted


class RestoreOrganizationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, organization_id: UUID, locale: str) -> OrganizationDTO:
        async with self.unit_of_work:
            organization = await _get_organization(self.unit_of_work, organization_id, with_trashed=True)
            if organization.deleted_at is None:
                raise OrganizationException.not_found(organization_id)
            await self.unit_of_work.organizations.restore(organization.id)
            organization.deleted_at = None
            await AuditService(self.unit_of_work).log_organization_action("restored", organization.id)
            await self.unit_of_work.commit()
            return OrganizationDTO.from_entity(organization, locale)


class GetOrganizationStatsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, organization_id: UUID) -> OrganizationStatsDTO:
        async with self.unit_of_work:
            organization = await _get_organization(self.unit_of_work, organization_id)
            summary = await self.unit_of_work.stats.organization_summary(organization.id)
            return OrganizationStatsDTO(organization_id=organization.id.value, **summary)
