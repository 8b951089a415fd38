"""Notification DTOs"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ...domain.enums import NotificationChannel, NotificationPriority, NotificationType


class NotificationCreateDTO(BaseModel):
    notifiable_id: UUID
    type: NotificationType
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, max_length=2000)
    channel: NotificationChannel = NotificationChannel.DATABASE
    priority: NotificationPriority = NotificationPriority.NORMAL
    data: Dict[str, Any] = {}
    scheduled_at: Optional[datetime] = None


class NotificationDTO(BaseModel):
    id: UUID
    type: str
    category: str
    title: str
    message: str
    channel: str
    priority: str
    is_high_priority: bool
    status: str
    data: Dict[str, Any]
    read: bool
    read_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, notification):
        return cls(
            id=notification.id.value,
            type=notification.type.value,
            category=notification.type.category,
            title=notification.title,
            message=notification.message,
            channel=notification.channel.value,
            priority=notification.priority.value,
            is_high_priority=notification.is_high_priority(),
            status=notification.status.value,
            data=notification.data,
            read=notification.is_read(),
            read_at=notification.read_at,
            scheduled_at=notification.scheduled_at,
            sent_at=notification.sent_at,
            created_at=notification.created_at,
        )


class UnreadCountDTO(BaseModel):
    unread: int
