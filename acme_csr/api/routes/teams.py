"""Team routes"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_current_user, get_pagination, get_unit_of_work, paginated
from ...application.dtos.common import MessageResponse
from ...application.dtos.team_dtos import TeamCreateDTO, TeamDTO, TeamMemberAddDTO, TeamStatsDTO, TeamUpdateDTO
from ...application.use_cases.team_use_cases import (
    AddTeamMemberUseCase,
    CreateTeamUseCase,
    DeleteTeamUseCase,
    GetTeamStatsUseCase,
    GetTeamUseCase,
    ListTeamsUseCase,
    RemoveTeamMemberUseCase,
    UpdateTeamUseCase,
)
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.pagination import PageRequest

router = APIRouter()


@router.get("")
async def list_teams(
    organization_id: Optional[UUID] = None,
    page: PageRequest = Depends(get_pagination),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return paginated(await ListTeamsUseCase(unit_of_work).execute(page, organization_id))


@router.post("", response_model=TeamDTO, status_code=status.HTTP_201_CREATED)
async def create_team(
    request: TeamCreateDTO,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Create a team; the creator becomes its leader"""
    return await CreateTeamUseCase(unit_of_work).execute(request, current_user)


@router.get("/{team_id}", response_model=TeamDTO)
async def get_team(
    team_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetTeamUseCase(unit_of_work).execute(team_id)


@router.put("/{team_id}", response_model=TeamDTO)
async def update_team(
    team_id: UUID,
    request: TeamUpdateDTO,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await UpdateTeamUseCase(unit_of_work).execute(team_id, request, current_user)


@router.delete("/{team_id}", response_model=MessageResponse)
async def delete_team(
    team_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    await DeleteTeamUseCase(unit_of_work).execute(team_id, current_user)
    return MessageResponse(message="Team deleted")


@router.post("/{team_id}/members", response_model=TeamDTO)
async def add_member(
    team_id: UUID,
    request: TeamMemberAddDTO,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await AddTeamMemberUseCase(unit_of_work).execute(team_id, request, current_user)


@router.delete("/{team_id}/members/{member_id}", response_model=TeamDTO)
async def remove_member(
    team_id: UUID,
    member_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await RemoveTeamMemberUseCase(unit_of_work).execute(team_id, member_id, current_user)


@router.get("/{team_id}/stats", response_model=TeamStatsDTO)
async def get_team_stats(
    team_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Member count and donation totals"""
    return await GetTeamStatsUseCase(unit_of_work).execute(team_id)
