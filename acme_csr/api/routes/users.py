"""User routes"""

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_user, get_unit_of_work
from ...application.dtos.user_dtos import EmployeeStatsDTO, UpdateProfileDTO, UserDTO
from ...application.use_cases.user_use_cases import (
    GetEmployeeStatsUseCase,
    GetUserProfileUseCase,
    UpdateUserProfileUseCase,
)
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork

router = APIRouter()


@router.get("/me", response_model=UserDTO)
async def get_profile(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Get current user profile"""
    return await GetUserProfileUseCase(unit_of_work).execute(current_user.id.value)


@router.put("/me", response_model=UserDTO)
async def update_profile(
    request: UpdateProfileDTO,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Update current user profile"""
    return await UpdateUserProfileUseCase(unit_of_work).execute(current_user.id.value, request)


@router.get("/me/stats", response_model=EmployeeStatsDTO)
async def get_my_stats(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Donation totals and campaign counts for the current user"""
    return await GetEmployeeStatsUseCase(unit_of_work).execute(current_user.id.value)
