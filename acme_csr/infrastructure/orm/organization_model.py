"""Organization ORM Model"""

from sqlalchemy import Column, String, DateTime, Boolean, JSON, Uuid
from sqlalchemy.orm import relationship
from uuid import uuid4

from ...db.models import Base, TimestampMixin, SoftDeleteMixin


class OrganizationModel(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = 'organizations'

    id = Column(Uuid, primary_key=True, default=uuid4)

    # Translatable fields: {"en": "...", "fr": "..."}
    name = Column(JSON, nullable=False)
    description = Column(JSON, nullable=False, default=dict)
    mission = Column(JSON, nullable=False, default=dict)

    registration_number = Column(String(100), unique=True, nullable=True)
    tax_id = Column(String(100), nullable=True)
    category = Column(String(100), nullable=True)
    website = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    country = Column(String(2), nullable=True)
    subdomain = Column(String(63), unique=True, nullable=True, index=True)
    logo_url = Column(String(512), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False, index=True)
    verification_date = Column(DateTime, nullable=True)

    # Relationships
    campaigns = relationship('CampaignModel', back_populates='organization')
    users = relationship('UserModel', back_populates='organization')
