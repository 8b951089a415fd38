"""Team ORM Models"""

from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from uuid import uuid4

from ...db.models import Base, TimestampMixin


class TeamModel(TimestampMixin, Base):
    __tablename__ = 'teams'

    id = Column(Uuid, primary_key=True, default=uuid4)
    organization_id = Column(Uuid, ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    leader_id = Column(Uuid, ForeignKey('users.id'), nullable=False)

    members = relationship('TeamMemberModel', back_populates='team', cascade='all, delete-orphan', lazy='selectin')


class TeamMemberModel(Base):
    __tablename__ = 'team_members'

    team_id = Column(Uuid, ForeignKey('teams.id', ondelete='CASCADE'), primary_key=True)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True)
    role = Column(String(16), nullable=False, default='member')
    joined_at = Column(DateTime, server_default=func.now(), nullable=False)

    team = relationship('TeamModel', back_populates='members')
