"""Organization and tenant domain events"""

from dataclasses import dataclass

from ..value_objects.entity_ids import OrganizationId, TenantId


@dataclass(frozen=True)
class OrganizationCreated:
    organization_id: OrganizationId


@dataclass(frozen=True)
class OrganizationUpdated:
    organization_id: OrganizationId


@dataclass(frozen=True)
class OrganizationVerified:
    organization_id: OrganizationId


@dataclass(frozen=True)
class OrganizationDeactivated:
    organization_id: OrganizationId


@dataclass(frozen=True)
class TenantProvisioningRequested:
    tenant_id: TenantId
    organization_id: OrganizationId


@dataclass(frozen=True)
class TenantProvisioned:
    tenant_id: TenantId
    organization_id: OrganizationId


@dataclass(frozen=True)
class TenantSuspended:
    tenant_id: TenantId
    reason: str
