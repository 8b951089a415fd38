"""Organization repository interface"""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities.organization import Organization
from ..value_objects.entity_ids import OrganizationId
from ..value_objects.pagination import Page, PageRequest


class IOrganizationRepository(ABC):

    @abstractmethod
    async def get_by_id(self, organization_id: OrganizationId, with_trashed: bool = False) -> Optional[Organization]:
        pass

    @abstractmethod
    async def get_by_subdomain(self, subdomain: str) -> Optional[Organization]:
        pass

    @abstractmethod
    async def get_by_registration_number(self, registration_number: str) -> Optional[Organization]:
        pass

    @abstractmethod
    async def add(self, organization: Organization) -> Organization:
        pass

    @abstractmethod
    async def update(self, organization: Organization) -> Organization:
        pass

    @abstractmethod
    async def soft_delete(self, organization_id: OrganizationId) -> bool:
        pass

    @abstractmethod
    async def restore(self, organization_id: OrganizationId) -> bool:
        pass

    @abstractmethod
    async def list(
        self,
        page: PageRequest,
        search: Optional[str] = None,
        verified: Optional[bool] = None,
        active: Optional[bool] = None,
    ) -> Page[Organization]:
        pass
