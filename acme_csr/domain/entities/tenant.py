"""Tenant entity: one isolated database per organization subdomain"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..enums import TenantStatus
from ..exceptions import TenantException
from ..value_objects.entity_ids import OrganizationId, TenantId
from ..value_objects.slug import Subdomain
from ..events.organization_events import TenantProvisioningRequested, TenantProvisioned, TenantSuspended


@dataclass
class Tenant:
    id: TenantId
    organization_id: OrganizationId
    subdomain: Subdomain
    database: str
    status: TenantStatus = TenantStatus.PENDING
    admin_data: Dict[str, Any] = field(default_factory=dict)
    features: Dict[str, bool] = field(default_factory=dict)
    provisioning_error: Optional[str] = None
    provisioned_at: Optional[datetime] = None
    suspended_at: Optional[datetime] = None
    suspension_reason: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # Domain events
    _events: List = field(default_factory=list, init=False)

    @classmethod
    def create(cls, organization_id: OrganizationId, subdomain: Subdomain, database_prefix: str, admin_data: Optional[Dict[str, Any]] = None) -> "Tenant":
        tenant_id = TenantId.generate()
        tenant = cls(
            id=tenant_id,
            organization_id=organization_id,
            subdomain=subdomain,
            database=f"{database_prefix}{tenant_id.value.hex}",
            admin_data=admin_data or {},
        )
        tenant._events.append(TenantProvisioningRequested(tenant_id=tenant.id, organization_id=organization_id))
        return tenant

    def start_provisioning(self) -> None:
        if self.status != TenantStatus.PENDING:
            raise TenantException.invalid_transition(self.status, "start provisioning")
        self.status = TenantStatus.PROVISIONING
        self.provisioning_error = None
        self.updated_at = datetime.utcnow()

    def mark_provisioned(self) -> None:
        if self.status != TenantStatus.PROVISIONING:
            raise TenantException.invalid_transition(self.status, "complete provisioning of")
        self.status = TenantStatus.ACTIVE
        self.provisioned_at = datetime.utcnow()
        self.updated_at = datetime.utcnow()
        self._events.append(TenantProvisioned(tenant_id=self.id, organization_id=self.organization_id))

    def mark_failed(self, reason: str) -> None:
        if self.status not in (TenantStatus.PENDING, TenantStatus.PROVISIONING):
            raise TenantException.invalid_transition(self.status, "fail")
        self.status = TenantStatus.FAILED
        self.provisioning_error = reason
        self.updated_at = datetime.utcnow()

    def retry(self) -> None:
        if self.status != TenantStatus.FAILED:
            raise TenantException.invalid_transition(self.status, "retry")
        self.status = TenantStatus.PENDING
        self.updated_at = datetime.utcnow()
        self._events.append(TenantProvisioningRequested(tenant_id=self.id, organization_id=self.organization_id))

    def suspend(self, reason: str) -> None:
        if self.status != TenantStatus.ACTIVE:
            raise TenantException.invalid_transition(self.status, "suspend")
        self.status = TenantStatus.SUSPENDED
        self.suspension_reason = reason
        self.suspended_at = datetime.utcnow()
        self.updated_at = datetime.utcnow()
        self._events.append(TenantSuspended(tenant_id=self.id, reason=reason))

    def reactivate(self) -> None:
        if self.status != TenantStatus.SUSPENDED:
            raise TenantException.invalid_transition(self.status, "reactivate")
        self.status = TenantStatus.ACTIVE
        self.suspension_reason = None
        self.suspended_at = None
        self.updated_at = datetime.utcnow()

    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE

    def has_feature(self, feature: str) -> bool:
        return bool(self.features.get(feature, False))

    def enable_feature(self, feature: str) -> None:
        self.features = {**self.features, feature: True}
        self.updated_at = datetime.utcnow()

    def disable_feature(self, feature: str) -> None:
        self.features = {**self.features, feature: False}
        self.updated_at = datetime.utcnow()

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events
