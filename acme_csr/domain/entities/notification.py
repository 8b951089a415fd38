"""Notification entity"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..enums import NotificationChannel, NotificationPriority, NotificationStatus, NotificationType
from ..value_objects.entity_ids import NotificationId, UserId


@dataclass
class Notification:
    id: NotificationId
    notifiable_id: UserId
    type: NotificationType
    title: str
    message: str
    channel: NotificationChannel = NotificationChannel.DATABASE
    priority: NotificationPriority = NotificationPriority.NORMAL
    data: Dict[str, Any] = field(default_factory=dict)
    read_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def create(
        cls,
        notifiable_id: UserId,
        type: NotificationType,
        title: str,
        message: str,
        channel: NotificationChannel = NotificationChannel.DATABASE,
        priority: NotificationPriority = NotificationPriority.NORMAL,
        data: Optional[Dict[str, Any]] = None,
        scheduled_at: Optional[datetime] = None,
    ) -> "Notification":
        if not title or not title.strip():
            raise ValueError("Notification title cannot be empty")
        if not message or not message.strip():
            raise ValueError("Notification message cannot be empty")
        payload = dict(data or {})
        payload.setdefault("status", NotificationStatus.PENDING.value)
        return cls(
            id=NotificationId.generate(),
            notifiable_id=notifiable_id,
            type=type,
            title=title.strip(),
            message=message.strip(),
            channel=channel,
            priority=priority,
            data=payload,
            scheduled_at=scheduled_at,
        )

    def is_read(self) -> bool:
        return self.read_at is not None

    def mark_as_read(self) -> None:
        if self.read_at is None:
            self.read_at = datetime.utcnow()
            self.updated_at = datetime.utcnow()

    def mark_as_unread(self) -> None:
        self.read_at = None
        self.updated_at = datetime.utcnow()

    def is_high_priority(self) -> bool:
        return self.priority.is_high()

    def can_be_sent_now(self, now: Optional[datetime] = None) -> bool:
        if self.scheduled_at is None:
            return True
        return self.scheduled_at <= (now or datetime.utcnow())

    @property
    def status(self) -> NotificationStatus:
        return NotificationStatus(self.data.get("status", NotificationStatus.PENDING.value))

    def mark_as_sent(self) -> None:
        self.sent_at = datetime.utcnow()
        self.data = {**self.data, "status": NotificationStatus.SENT.value}
        self.updated_at = datetime.utcnow()

    def mark_as_failed(self, reason: str) -> None:
        self.data = {**self.data, "status": NotificationStatus.FAILED.value, "failure_reason": reason}
        self.updated_at = datetime.utcnow()
