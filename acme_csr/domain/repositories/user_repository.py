"""User repository interface"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.user import User
from ..enums import UserRole
from ..value_objects.email import Email
from ..value_objects.entity_ids import OrganizationId, UserId
from ..value_objects.pagination import Page, PageRequest


class IUserRepository(ABC):

    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: Email) -> Optional[User]:
        pass

    @abstractmethod
    async def add(self, user: User) -> User:
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        pass

    @abstractmethod
    async def exists_by_email(self, email: Email) -> bool:
        pass

    @abstractmethod
    async def list(
        self,
        page: PageRequest,
        organization_id: Optional[OrganizationId] = None,
        role: Optional[UserRole] = None,
        search: Optional[str] = None,
    ) -> Page[User]:
        pass

    @abstractmethod
    async def get_by_ids(self, user_ids: List[UserId]) -> List[User]:
        pass
