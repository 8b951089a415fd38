"""Category ORM Model"""

from sqlalchemy import Column, Integer, String, JSON, Uuid
from sqlalchemy.orm import relationship
from uuid import uuid4

from ...db.models import Base, TimestampMixin
from ...domain.enums import CategoryStatus


class CategoryModel(TimestampMixin, Base):
    __tablename__ = 'categories'

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(JSON, nullable=False)
    description = Column(JSON, nullable=False, default=dict)
    slug = Column(String(120), unique=True, nullable=False, index=True)
    status = Column(String(16), default=CategoryStatus.ACTIVE.value, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    color = Column(String(32), nullable=True)
    icon = Column(String(64), nullable=True)

    campaigns = relationship('CampaignModel', back_populates='category')
