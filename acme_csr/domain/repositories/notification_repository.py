"""Notification repository interface"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.notification import Notification
from ..value_objects.entity_ids import NotificationId, UserId
from ..value_objects.pagination import Page, PageRequest


class INotificationRepository(ABC):

    @abstractmethod
    async def get_by_id(self, notification_id: NotificationId) -> Optional[Notification]:
        pass

    @abstractmethod
    async def add(self, notification: Notification) -> Notification:
        pass

    @abstractmethod
    async def add_many(self, notifications: List[Notification]) -> List[Notification]:
        pass

    @abstractmethod
    async def update(self, notification: Notification) -> Notification:
        pass

    @abstractmethod
    async def delete(self, notification_id: NotificationId) -> bool:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: UserId, page: PageRequest, unread_only: bool = False) -> Page[Notification]:
        pass

    @abstractmethod
    async def count_unread(self, user_id: UserId) -> int:
        pass

    @abstractmethod
    async def mark_all_read(self, user_id: UserId) -> int:
        pass
