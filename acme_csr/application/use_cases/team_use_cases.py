"""Team use cases"""

from decimal import Decimal
from uuid import UUID

from ...core.config import settings
from ...domain.entities.team import Team
from ...domain.entities.user import User
from ...domain.enums import DonationStatus
from ...domain.exceptions import OrganizationException, TeamException, UserException
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import OrganizationId, TeamId, UserId
from ...domain.value_objects.pagination import Page, PageRequest
from ..dtos.team_dtos import TeamCreateDTO, TeamDTO, TeamMemberAddDTO, TeamStatsDTO, TeamUpdateDTO
from ..services.audit_service import AuditService


async def _get_team(unit_of_work: IUnitOfWork, team_id) -> Team:
    team = await unit_of_work.teams.get_by_id(TeamId.coerce(team_id))
    if not team:
        raise TeamException.not_found(team_id)
    return team


async def _get_member_user(unit_of_work: IUnitOfWork, user_id, organization_id: OrganizationId) -> User:
    user = await unit_of_work.users.get_by_id(UserId.coerce(user_id))
    if not user or (user.organization_id is not None and user.organization_id != organization_id):
        raise UserException.not_found(user_id)
    return user


def _authorize(team: Team, user: User) -> None:
    if team.leader_id != user.id and not user.is_admin():
        raise TeamException.not_found(team.id.value)


class CreateTeamUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: TeamCreateDTO, user: User) -> TeamDTO:
        async with self.unit_of_work:
            organization_id = OrganizationId(request.organization_id) if request.organization_id else user.organization_id
            if organization_id is None or not await self.unit_of_work.organizations.get_by_id(organization_id):
                raise OrganizationException.not_found(request.organization_id)
            leader = user
            if request.leader_id:
                leader = await _get_member_user(self.unit_of_work, request.leader_id, organization_id)

            team = Team.create(organization_id, request.name, leader.id, request.description)
            await self.unit_of_work.teams.add(team)
            await AuditService(self.unit_of_work).log("team.created", "team", str(team.id), new_values={"name": team.name})
            await self.unit_of_work.commit()
            return TeamDTO.from_entity(team)


class UpdateTeamUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, team_id: UUID, request: TeamUpdateDTO, user: User) -> TeamDTO:
        async with self.unit_of_work:
            team = await _get_team(self.unit_of_work, team_id)
            _authorize(team, user)
            old_values = {"name": team.name, "leader_id": str(team.leader_id)}
            if request.name is not None:
                team.rename(request.name)
            if request.description is not None:
                team.description = request.description
            if request.leader_id is not None:
                team.change_leader(UserId(request.leader_id))
            await self.unit_of_work.teams.update(team)
            await AuditService(self.unit_of_work).log(
                "team.updated", "team", str(team.id), old_values, {"name": team.name, "leader_id": str(team.leader_id)}
            )
            await self.unit_of_work.commit()
            return TeamDTO.from_entity(team)


class AddTeamMemberUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, team_id: UUID, request: TeamMemberAddDTO, user: User) -> TeamDTO:
        async with self.unit_of_work:
            team = await _get_team(self.unit_of_work, team_id)
            _authorize(team, user)
            member = await _get_member_user(self.unit_of_work, request.user_id, team.organization_id)
            team.add_member(member.id)
            await self.unit_of_work.teams.update(team)
            await AuditService(self.unit_of_work).log("team.member_added", "team", str(team.id), new_values={"user_id": str(member.id)})
            await self.unit_of_work.commit()
            return TeamDTO.from_entity(team)


class RemoveTeamMemberUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, team_id: UUID, member_id: UUID, user: User) -> TeamDTO:
        async with self.unit_of_work:
            team = await _get_team(self.unit_of_work, team_id)
            _authorize(team, user)
            team.remove_member(UserId(member_id))
            await self.unit_of_work.teams.update(team)
            await AuditService(self.unit_of_work).log("team.member_removed", "team", str(team.id), old_values={"user_id": str(member_id)})
            await self.unit_of_work.commit()
            return TeamDTO.from_entity(team)


class DeleteTeamUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, team_id: UUID, user: User) -> bool:
        async with self.unit_of_work:
            team = await _get_team(self.unit_of_work, team_id)
            _authorize(team, user)
            deleted = await self.unit_of_work.teams.delete(team.id)
            await AuditService(self.unit_of_work).log("team.deleted", "team", str(team.id), old_values={"name": team.name})
            await self.unit_of_work.commit()
            return deleted


class GetTeamUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, team_id: UUID) -> TeamDTO:
        async with self.unit_of_work:
            return TeamDTO.from_entity(await _get_team(self.unit_of_work, team_id))


class ListTeamsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, page: PageRequest, organization_id: UUID = None) -> Page[TeamDTO]:
        async with self.unit_of_work:
            result = await self.unit_of_work.teams.list(page, OrganizationId(organization_id) if organization_id else None)
            return Page(
                items=[TeamDTO.from_entity(team) for team in result.items],
                total=result.total,
                page=result.page,
                per_page=result.per_page,
            )


class GetTeamStatsUseCase:
    """Totals raised by the members' completed donations"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, team_id: UUID) -> TeamStatsDTO:
        async with self.unit_of_work:
            team = await _get_team(self.unit_of_work, team_id)
            donations = await self.unit_of_work.donations.list_completed_by_users(team.member_ids())
            currency = settings.BASE_CURRENCY
            total = sum(
                (donation.amount.amount for donation in donations
                 if donation.status == DonationStatus.COMPLETED and donation.amount.currency == currency),
                Decimal("0"),
            )
            return TeamStatsDTO(
                team_id=team.id.value,
                member_count=team.member_count,
                total_raised=total,
                currency=currency,
                donations_count=len(donations),
                participating_members=len({donation.user_id for donation in donations}),
            )
