"""Tenant ORM Model (central database)"""

from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Uuid
from uuid import uuid4

from ...db.models import Base, TimestampMixin
from ...domain.enums import TenantStatus


class TenantModel(TimestampMixin, Base):
    __tablename__ = 'tenants'

    id = Column(Uuid, primary_key=True, default=uuid4)
    organization_id = Column(Uuid, ForeignKey('organizations.id'), unique=True, nullable=False)
    subdomain = Column(String(63), unique=True, nullable=False, index=True)
    database = Column(String(128), unique=True, nullable=False)
    status = Column(String(16), default=TenantStatus.PENDING.value, nullable=False, index=True)
    admin_data = Column(JSON, nullable=False, default=dict)
    features = Column(JSON, nullable=False, default=dict)
    provisioning_error = Column(String(1000), nullable=True)
    provisioned_at = Column(DateTime, nullable=True)
    suspended_at = Column(DateTime, nullable=True)
    suspension_reason = Column(String(500), nullable=True)
