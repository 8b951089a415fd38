"""Notification repository implementation"""

from datetime import datetime
from typing import Optional, List
from sqlalchemy.orm import Session

from ...domain.entities.notification import Notification
from ...domain.enums import NotificationChannel, NotificationPriority, NotificationType
from ...domain.repositories.notification_repository import INotificationRepository
from ...domain.value_objects.entity_ids import NotificationId, UserId
from ...domain.value_objects.pagination import Page, PageRequest
from ..orm.notification_model import NotificationModel
from ._paging import paginate


class NotificationRepositoryImpl(INotificationRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, notification_id: NotificationId) -> Optional[Notification]:
        model = self.session.query(NotificationModel).filter(NotificationModel.id == notification_id.value).first()
        return self._map_to_entity(model) if model else None

    async def add(self, notification: Notification) -> Notification:
        self.session.add(self._create_model_from_entity(notification))
        self.session.flush()
        return notification

    async def add_many(self, notifications: List[Notification]) -> List[Notification]:
        self.session.add_all([self._create_model_from_entity(notification) for notification in notifications])
        self.session.flush()
        return notifications

    async def update(self, notification: Notification) -> Notification:
        model = self.session.query(NotificationModel).filter(NotificationModel.id == notification.id.value).first()
        if model:
            model.read_at = notification.read_at
            model.sent_at = notification.sent_at
            model.data = dict(notification.data)
            model.updated_at = notification.updated_at
            self.session.flush()
        return notification

    async def delete(self, notification_id: NotificationId) -> bool:
        deleted = self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id.value
        ).delete(synchronize_session=False)
        return deleted > 0

    async def list_for_user(self, user_id: UserId, page: PageRequest, unread_only: bool = False) -> Page[Notification]:
        query = self.session.query(NotificationModel).filter(NotificationModel.notifiable_id == user_id.value)
        if unread_only:
            query = query.filter(NotificationModel.read_at.is_(None))
        query = query.order_by(NotificationModel.created_at.desc())
        return paginate(query, page, self._map_to_entity)

    async def count_unread(self, user_id: UserId) -> int:
        return self.session.query(NotificationModel).filter(
            NotificationModel.notifiable_id == user_id.value,
            NotificationModel.read_at.is_(None),
        ).count()

    async def mark_all_read(self, user_id: UserId) -> int:
        now = datetime.utcnow()
        return self.session.query(NotificationModel).filter(
            NotificationModel.notifiable_id == user_id.value,
            NotificationModel.read_at.is_(None),
        ).update({NotificationModel.read_at: now, NotificationModel.updated_at: now}, synchronize_session=False)

    def _create_model_from_entity(self, notification: Notification) -> NotificationModel:
        return NotificationModel(
            id=notification.id.value,
            notifiable_id=notification.notifiable_id.value,
            type=notification.type.value,
            title=notification.title,
            message=notification.message,
            channel=notification.channel.value,
            priority=notification.priority.value,
            data=dict(notification.data),
            read_at=notification.read_at,
            scheduled_at=notification.scheduled_at,
            sent_at=notification.sent_at,
            created_at=notification.created_at,
            updated_at=notification.updated_at,
        )

    def _map_to_entity(self, model: NotificationModel) -> Notification:
        return Notification(
            id=NotificationId(model.id),
            notifiable_id=UserId(model.notifiable_id),
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            channel=NotificationChannel(model.channel),
            priority=NotificationPriority(model.priority),
            data=dict(model.data or {}),
            read_at=model.read_at,
            scheduled_at=model.scheduled_at,
            sent_at=model.sent_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
