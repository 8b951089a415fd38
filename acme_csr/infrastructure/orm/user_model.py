"""User ORM Model"""

from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from uuid import uuid4

from ...db.models import Base, TimestampMixin
from ...domain.enums import UserStatus, UserRole


class UserModel(TimestampMixin, Base):
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid4)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(32), default=UserRole.EMPLOYEE.value, nullable=False, index=True)
    status = Column(String(32), default=UserStatus.ACTIVE.value, nullable=False)
    organization_id = Column(Uuid, ForeignKey('organizations.id', ondelete='SET NULL'), nullable=True, index=True)
    department = Column(String(100), nullable=True)
    job_title = Column(String(100), nullable=True)
    locale = Column(String(5), default='en', nullable=False)
    email_verified_at = Column(DateTime, nullable=True)
    suspension_reason = Column(String(500), nullable=True)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    organization = relationship('OrganizationModel', back_populates='users')
    donations = relationship('DonationModel', back_populates='user')
