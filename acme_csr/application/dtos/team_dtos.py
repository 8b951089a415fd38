"""Team DTOs"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class TeamCreateDTO(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    leader_id: Optional[UUID] = None
    organization_id: Optional[UUID] = None


class TeamUpdateDTO(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    leader_id: Optional[UUID] = None


class TeamMemberAddDTO(BaseModel):
    user_id: UUID


class TeamMemberDTO(BaseModel):
    user_id: UUID
    role: str
    joined_at: datetime


class TeamDTO(BaseModel):
    id: UUID
    organization_id: UUID
    name: str
    description: Optional[str] = None
    leader_id: UUID
    member_count: int
    members: List[TeamMemberDTO]
    created_at: datetime

    @classmethod
    def from_entity(cls, team):
        return cls(
            id=team.id.value,
            organization_id=team.organization_id.value,
            name=team.name,
            description=team.description,
            leader_id=team.leader_id.value,
            member_count=team.member_count,
            members=[
                TeamMemberDTO(user_id=member.user_id.value, role=member.role.value, joined_at=member.joined_at)
                for member in team.members
            ],
            created_at=team.created_at,
        )


class TeamStatsDTO(BaseModel):
    team_id: UUID
    member_count: int
    total_raised: Decimal
    currency: str
    donations_count: int
    participating_members: int
