"""Team repository interface"""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities.team import Team
from ..value_objects.entity_ids import OrganizationId, TeamId
from ..value_objects.pagination import Page, PageRequest


class ITeamRepository(ABC):

    @abstractmethod
    async def get_by_id(self, team_id: TeamId) -> Optional[Team]:
        pass

    @abstractmethod
    async def add(self, team: Team) -> Team:
        pass

    @abstractmethod
    async def update(self, team: Team) -> Team:
        pass

    @abstractmethod
    async def delete(self, team_id: TeamId) -> bool:
        pass

    @abstractmethod
    async def list(self, page: PageRequest, organization_id: Optional[OrganizationId] = None) -> Page[Team]:
        pass
