"""Campaign ORM Model"""

from sqlalchemy import Column, Computed, Integer, Numeric, String, DateTime, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship
from uuid import uuid4

from ...db.models import Base, TimestampMixin, SoftDeleteMixin
from ...domain.enums import CampaignStatus

GOAL_PERCENTAGE_EXPRESSION = (
    "CASE WHEN goal_amount > 0 THEN "
    "CASE WHEN current_amount >= goal_amount THEN 100 "
    "ELSE ROUND(current_amount * 100.0 / goal_amount, 2) END "
    "ELSE 0 END"
)


class CampaignModel(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = 'campaigns'

    id = Column(Uuid, primary_key=True, default=uuid4)
    title = Column(JSON, nullable=False)
    description = Column(JSON, nullable=False, default=dict)

    goal_amount = Column(Numeric(12, 2), nullable=False)
    current_amount = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default='EUR')
    goal_percentage = Column(Numeric(5, 2), Computed(GOAL_PERCENTAGE_EXPRESSION, persisted=True))

    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False, index=True)
    status = Column(String(32), default=CampaignStatus.DRAFT.value, nullable=False, index=True)

    organization_id = Column(Uuid, ForeignKey('organizations.id'), nullable=False, index=True)
    category_id = Column(Uuid, ForeignKey('categories.id', ondelete='SET NULL'), nullable=True, index=True)
    user_id = Column(Uuid, ForeignKey('users.id'), nullable=False, index=True)
    team_id = Column(Uuid, ForeignKey('teams.id', ondelete='SET NULL'), nullable=True)

    donations_count = Column(Integer, default=0, nullable=False)
    featured_image = Column(String(512), nullable=True)

    # Approval workflow
    submitted_for_approval_at = Column(DateTime, nullable=True)
    approved_by = Column(Uuid, nullable=True)
    approved_at = Column(DateTime, nullable=True)
    rejected_by = Column(Uuid, nullable=True)
    rejected_at = Column(DateTime, nullable=True)
    rejection_reason = Column(String(1000), nullable=True)
    completed_at = Column(DateTime, nullable=True)

    # Relationships
    organization = relationship('OrganizationModel', back_populates='campaigns')
    category = relationship('CategoryModel', back_populates='campaigns')
    donations = relationship('DonationModel', back_populates='campaign', passive_deletes=True)
