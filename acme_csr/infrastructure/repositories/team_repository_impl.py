"""Team repository implementation"""

from typing import Optional
from sqlalchemy.orm import Session

from ...domain.entities.team import Team, TeamMember
from ...domain.enums import TeamMemberRole
from ...domain.repositories.team_repository import ITeamRepository
from ...domain.value_objects.entity_ids import OrganizationId, TeamId, UserId
from ...domain.value_objects.pagination import Page, PageRequest
from ..orm.team_model import TeamModel, TeamMemberModel
from ._paging import paginate


class TeamRepositoryImpl(ITeamRepository):

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, team_id: TeamId) -> Optional[TeamModel]:
        return self.session.query(TeamModel).filter(TeamModel.id == team_id.value).first()

    async def get_by_id(self, team_id: TeamId) -> Optional[Team]:
        model = self._get_model(team_id)
        return self._map_to_entity(model) if model else None

    async def add(self, team: Team) -> Team:
        model = TeamModel(id=team.id.value, organization_id=team.organization_id.value, created_at=team.created_at)
        self._update_model_from_entity(model, team)
        self.session.add(model)
        self.session.flush()
        return team

    async def update(self, team: Team) -> Team:
        model = self._get_model(team.id)
        if model:
            self._update_model_from_entity(model, team)
            self.session.flush()
        return team

    async def delete(self, team_id: TeamId) -> bool:
        model = self._get_model(team_id)
        if not model:
            return False
        self.session.delete(model)
        self.session.flush()
        return True

    async def list(self, page: PageRequest, organization_id: Optional[OrganizationId] = None) -> Page[Team]:
        query = self.session.query(TeamModel)
        if organization_id is not None:
            query = query.filter(TeamModel.organization_id == organization_id.value)
        query = query.order_by(TeamModel.name.asc())
        return paginate(query, page, self._map_to_entity)

    def _update_model_from_entity(self, model: TeamModel, team: Team) -> None:
        model.name = team.name
        model.description = team.description
        model.leader_id = team.leader_id.value
        model.updated_at = team.updated_at

        # Sync the membership rows with the aggregate
        wanted = {member.user_id.value: member for member in team.members}
        for row in list(model.members):
            if row.user_id not in wanted:
                model.members.remove(row)
            else:
                row.role = wanted.pop(row.user_id).role.value
        for user_id, member in wanted.items():
            model.members.append(TeamMemberModel(user_id=user_id, role=member.role.value, joined_at=member.joined_at))

    def _map_to_entity(self, model: TeamModel) -> Team:
        return Team(
            id=TeamId(model.id),
            organization_id=OrganizationId(model.organization_id),
            name=model.name,
            leader_id=UserId(model.leader_id),
            description=model.description,
            members=[
                TeamMember(user_id=UserId(row.user_id), role=TeamMemberRole(row.role), joined_at=row.joined_at)
                for row in sorted(model.members, key=lambda row: row.joined_at)
            ],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
