"""Read-side aggregates behind the dashboard widgets"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..value_objects.entity_ids import OrganizationId


class IStatsRepository(ABC):

    @abstractmethod
    async def donation_totals(self, since: Optional[datetime] = None, until: Optional[datetime] = None) -> Dict[str, Any]:
        """total_amount, donation_count, unique_donors, average_amount over completed donations"""

    @abstractmethod
    async def donations_by_status(self) -> Dict[str, int]:
        pass

    @abstractmethod
    async def donations_by_payment_method(self) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def monthly_donation_totals(self, months: int = 12) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def campaigns_by_status(self) -> Dict[str, int]:
        pass

    @abstractmethod
    async def raised_by_campaign_status(self) -> Dict[str, float]:
        """Sum of current_amount per campaign status"""
        pass

    @abstractmethod
    async def campaigns_by_category(self) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def top_campaigns(self, limit: int = 10) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def goal_completion(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def employee_participation(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def organization_counts(self) -> Dict[str, int]:
        pass

    @abstractmethod
    async def organization_summary(self, organization_id: OrganizationId) -> Dict[str, Any]:
        pass
