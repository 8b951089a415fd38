"""Donation ORM Model"""

from sqlalchemy import Column, Numeric, String, DateTime, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from uuid import uuid4

from ...db.models import Base, TimestampMixin
from ...domain.enums import DonationStatus


class DonationModel(TimestampMixin, Base):
    __tablename__ = 'donations'

    id = Column(Uuid, primary_key=True, default=uuid4)
    campaign_id = Column(Uuid, ForeignKey('campaigns.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey('users.id'), nullable=False, index=True)

    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default='EUR')
    payment_method = Column(String(32), nullable=False)
    payment_gateway = Column(String(32), nullable=True)
    transaction_id = Column(String(255), unique=True, nullable=True)
    status = Column(String(32), default=DonationStatus.PENDING.value, nullable=False, index=True)

    anonymous = Column(Boolean, default=False, nullable=False)
    recurring = Column(Boolean, default=False, nullable=False)
    recurring_frequency = Column(String(16), nullable=True)
    notes = Column(String(1000), nullable=True)
    failure_reason = Column(String(500), nullable=True)
    refund_reason = Column(String(500), nullable=True)

    donated_at = Column(DateTime, nullable=False, index=True)
    processed_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    refunded_at = Column(DateTime, nullable=True)

    # Relationships
    campaign = relationship('CampaignModel', back_populates='donations')
    user = relationship('UserModel', back_populates='donations')
