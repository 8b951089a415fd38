"""Donation repository interface"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.donation import Donation
from ..enums import DonationStatus
from ..value_objects.entity_ids import CampaignId, DonationId, UserId
from ..value_objects.pagination import Page, PageRequest


class IDonationRepository(ABC):

    @abstractmethod
    async def get_by_id(self, donation_id: DonationId) -> Optional[Donation]:
        pass

    @abstractmethod
    async def get_by_transaction_id(self, transaction_id: str) -> Optional[Donation]:
        pass

    @abstractmethod
    async def add(self, donation: Donation) -> Donation:
        pass

    @abstractmethod
    async def update(self, donation: Donation) -> Donation:
        pass

    @abstractmethod
    async def list_by_user(self, user_id: UserId, page: PageRequest) -> Page[Donation]:
        pass

    @abstractmethod
    async def list_by_campaign(self, campaign_id: CampaignId, page: PageRequest, status: Optional[DonationStatus] = None) -> Page[Donation]:
        pass

    @abstractmethod
    async def list(self, page: PageRequest, status: Optional[DonationStatus] = None) -> Page[Donation]:
        pass

    @abstractmethod
    async def count_completed_by_campaign(self, campaign_id: CampaignId) -> int:
        pass

    @abstractmethod
    async def list_completed_by_users(self, user_ids: List[UserId]) -> List[Donation]:
        pass
