"""Audit log ORM Model"""

from sqlalchemy import Column, String, DateTime, JSON, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from ...db.models import Base


class AuditLogModel(Base):
    __tablename__ = 'audit_logs'

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, nullable=True, index=True)
    user_name = Column(String(255), nullable=False)
    user_email = Column(String(255), nullable=False)
    user_role = Column(String(32), nullable=False)
    action = Column(String(100), nullable=False, index=True)
    entity_type = Column(String(64), nullable=False, index=True)
    entity_id = Column(String(64), nullable=True, index=True)
    old_values = Column(JSON, nullable=False, default=dict)
    new_values = Column(JSON, nullable=False, default=dict)
    # "metadata" is reserved on declarative classes
    meta = Column('metadata', JSON, nullable=False, default=dict)
    performed_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
