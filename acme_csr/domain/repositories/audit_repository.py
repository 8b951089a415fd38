"""Audit log repository interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from ..entities.audit_log import AuditLog
from ..value_objects.entity_ids import UserId
from ..value_objects.pagination import Page, PageRequest


@dataclass(frozen=True)
class AuditFilters:
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    action: Optional[str] = None
    user_id: Optional[UserId] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class IAuditLogRepository(ABC):

    @abstractmethod
    async def add(self, entry: AuditLog) -> AuditLog:
        pass

    @abstractmethod
    async def list(self, filters: AuditFilters, page: PageRequest) -> Page[AuditLog]:
        pass

    @abstractmethod
    async def entity_history(self, entity_type: str, entity_id: str) -> List[AuditLog]:
        pass

    @abstractmethod
    async def count_by_action(self, since: datetime) -> Dict[str, int]:
        pass
