"""Notification ORM Model"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON, Uuid
from uuid import uuid4

from ...db.models import Base, TimestampMixin


class NotificationModel(TimestampMixin, Base):
    __tablename__ = 'notifications'

    id = Column(Uuid, primary_key=True, default=uuid4)
    notifiable_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    type = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    channel = Column(String(16), nullable=False, default='database')
    priority = Column(String(16), nullable=False, default='normal')
    data = Column(JSON, nullable=False, default=dict)
    read_at = Column(DateTime, nullable=True, index=True)
    scheduled_at = Column(DateTime, nullable=True)
    sent_at = Column(DateTime, nullable=True)
