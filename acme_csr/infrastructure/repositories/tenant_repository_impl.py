"""Tenant repository implementation (central database)"""

from typing import Optional, List
from sqlalchemy.orm import Session

from ...domain.entities.tenant import Tenant
from ...domain.enums import TenantStatus
from ...domain.repositories.tenant_repository import ITenantRepository
from ...domain.value_objects.entity_ids import OrganizationId, TenantId
from ...domain.value_objects.slug import Subdomain
from ..orm.tenant_model import TenantModel


class TenantRepositoryImpl(ITenantRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, tenant_id: TenantId) -> Optional[Tenant]:
        model = self.session.query(TenantModel).filter(TenantModel.id == tenant_id.value).first()
        return self._map_to_entity(model) if model else None

    async def get_by_subdomain(self, subdomain: str) -> Optional[Tenant]:
        model = self.session.query(TenantModel).filter(TenantModel.subdomain == subdomain.lower()).first()
        return self._map_to_entity(model) if model else None

    async def get_by_organization_id(self, organization_id: OrganizationId) -> Optional[Tenant]:
        model = self.session.query(TenantModel).filter(TenantModel.organization_id == organization_id.value).first()
        return self._map_to_entity(model) if model else None

    async def add(self, tenant: Tenant) -> Tenant:
        model = TenantModel(
            id=tenant.id.value,
            organization_id=tenant.organization_id.value,
            subdomain=str(tenant.subdomain),
            database=tenant.database,
            created_at=tenant.created_at,
        )
        self._update_model_from_entity(model, tenant)
        self.session.add(model)
        self.session.flush()
        return tenant

    async def update(self, tenant: Tenant) -> Tenant:
        model = self.session.query(TenantModel).filter(TenantModel.id == tenant.id.value).first()
        if model:
            self._update_model_from_entity(model, tenant)
            self.session.flush()
        return tenant

    async def list(self, status: Optional[TenantStatus] = None) -> List[Tenant]:
        query = self.session.query(TenantModel)
        if status is not None:
            query = query.filter(TenantModel.status == status.value)
        return [self._map_to_entity(model) for model in query.order_by(TenantModel.subdomain.asc()).all()]

    def _update_model_from_entity(self, model: TenantModel, tenant: Tenant) -> None:
        model.status = tenant.status.value
        model.admin_data = dict(tenant.admin_data)
        model.features = dict(tenant.features)
        model.provisioning_error = tenant.provisioning_error
        model.provisioned_at = tenant.provisioned_at
        model.suspended_at = tenant.suspended_at
        model.suspension_reason = tenant.suspension_reason
        model.updated_at = tenant.updated_at

    def _map_to_entity(self, model: TenantModel) -> Tenant:
        return Tenant(
            id=TenantId(model.id),
            organization_id=OrganizationId(model.organization_id),
            subdomain=Subdomain(model.subdomain),
            database=model.database,
            status=TenantStatus(model.status),
            admin_data=dict(model.admin_data or {}),
            features=dict(model.features or {}),
            provisioning_error=model.provisioning_error,
            provisioned_at=model.provisioned_at,
            suspended_at=model.suspended_at,
            suspension_reason=model.suspension_reason,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
