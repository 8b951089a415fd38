"""Campaign repository interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ..entities.campaign import Campaign
from ..enums import CampaignStatus
from ..value_objects.entity_ids import CampaignId, CategoryId, OrganizationId, UserId
from ..value_objects.pagination import Page, PageRequest

SORTABLE_FIELDS = ("created_at", "start_date", "end_date", "goal_amount", "current_amount", "goal_percentage", "donations_count")


@dataclass(frozen=True)
class CampaignFilters:
    statuses: tuple = ()
    organization_id: Optional[OrganizationId] = None
    category_id: Optional[CategoryId] = None
    user_id: Optional[UserId] = None
    search: Optional[str] = None
    sort: str = "-created_at"
    with_trashed: bool = False
    only_trashed: bool = False


class ICampaignRepository(ABC):

    @abstractmethod
    async def get_by_id(self, campaign_id: CampaignId, with_trashed: bool = False) -> Optional[Campaign]:
        pass

    @abstractmethod
    async def add(self, campaign: Campaign) -> Campaign:
        pass

    @abstractmethod
    async def update(self, campaign: Campaign) -> Campaign:
        pass

    @abstractmethod
    async def soft_delete(self, campaign_id: CampaignId) -> bool:
        pass

    @abstractmethod
    async def restore(self, campaign_id: CampaignId) -> bool:
        pass

    @abstractmethod
    async def force_delete(self, campaign_id: CampaignId) -> bool:
        pass

    @abstractmethod
    async def list(self, filters: CampaignFilters, page: PageRequest) -> Page[Campaign]:
        pass

    @abstractmethod
    async def count_by_category(self, category_id: CategoryId) -> int:
        pass

    @abstractmethod
    async def count_by_status(self, status: CampaignStatus) -> int:
        pass

    @abstractmethod
    async def list_expired_active(self) -> List[Campaign]:
        pass

    @abstractmethod
    async def exists_with_title(self, organization_id: OrganizationId, title: str, locale: str = "en") -> bool:
        pass
