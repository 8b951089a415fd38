"""Tenant repository interface"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.tenant import Tenant
from ..enums import TenantStatus
from ..value_objects.entity_ids import OrganizationId, TenantId


class ITenantRepository(ABC):

    @abstractmethod
    async def get_by_id(self, tenant_id: TenantId) -> Optional[Tenant]:
        pass

    @abstractmethod
    async def get_by_subdomain(self, subdomain: str) -> Optional[Tenant]:
        pass

    @abstractmethod
    async def get_by_organization_id(self, organization_id: OrganizationId) -> Optional[Tenant]:
        pass

    @abstractmethod
    async def add(self, tenant: Tenant) -> Tenant:
        pass

    @abstractmethod
    async def update(self, tenant: Tenant) -> Tenant:
        pass

    @abstractmethod
    async def list(self, status: Optional[TenantStatus] = None) -> List[Tenant]:
        pass
