"""Team entity"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from ..enums import TeamMemberRole
from ..exceptions import TeamException
from ..value_objects.entity_ids import OrganizationId, TeamId, UserId


@dataclass
class TeamMember:
    user_id: UserId
    role: TeamMemberRole = TeamMemberRole.MEMBER
    joined_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Team:
    id: TeamId
    organization_id: OrganizationId
    name: str
    leader_id: UserId
    description: Optional[str] = None
    members: List[TeamMember] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def create(cls, organization_id: OrganizationId, name: str, leader_id: UserId, description: Optional[str] = None) -> "Team":
        if not name or not name.strip():
            raise ValueError("Team name cannot be empty")
        team = cls(
            id=TeamId.generate(),
            organization_id=organization_id,
            name=name.strip(),
            leader_id=leader_id,
            description=description,
        )
        team.members.append(TeamMember(user_id=leader_id, role=TeamMemberRole.LEADER))
        return team

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValueError("Team name cannot be empty")
        self.name = name.strip()
        self.updated_at = datetime.utcnow()

    def has_member(self, user_id: UserId) -> bool:
        return any(member.user_id == user_id for member in self.members)

    def add_member(self, user_id: UserId) -> TeamMember:
        if self.has_member(user_id):
            raise TeamException.already_member(user_id.value)
        member = TeamMember(user_id=user_id)
        self.members.append(member)
        self.updated_at = datetime.utcnow()
        return member

    def remove_member(self, user_id: UserId) -> None:
        if user_id == self.leader_id:
            raise TeamException.cannot_remove_leader()
        if not self.has_member(user_id):
            raise TeamException.not_member(user_id.value)
        self.members = [member for member in self.members if member.user_id != user_id]
        self.updated_at = datetime.utcnow()

    def change_leader(self, user_id: UserId) -> None:
        if not self.has_member(user_id):
            raise TeamException.not_member(user_id.value)
        for member in self.members:
            if member.user_id == self.leader_id:
                member.role = TeamMemberRole.MEMBER
            if member.user_id == user_id:
                member.role = TeamMemberRole.LEADER
        self.leader_id = user_id
        self.updated_at = datetime.utcnow()

    @property
    def member_count(self) -> int:
        return len(self.members)

    def member_ids(self) -> List[UserId]:
        return [member.user_id for member in self.members]

    def roles_by_user(self) -> Dict[UserId, TeamMemberRole]:
        return {member.user_id: member.role for member in self.members}
