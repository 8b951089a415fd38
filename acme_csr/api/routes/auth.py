"""Authentication routes"""

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_unit_of_work
from ...application.dtos.user_dtos import AuthResponseDTO, LoginUserDTO, RefreshTokenDTO, RegisterUserDTO, TokenDTO
from ...application.use_cases.auth_use_cases import LoginUserUseCase, RefreshTokenUseCase, RegisterUserUseCase
from ...domain.repositories.unit_of_work import IUnitOfWork

router = APIRouter()


@router.post("/register", response_model=AuthResponseDTO, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: RegisterUserDTO,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Register a new user"""
    return await RegisterUserUseCase(unit_of_work).execute(user_data)


@router.post("/login", response_model=AuthResponseDTO)
async def login_user(
    login_data: LoginUserDTO,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Login user"""
    return await LoginUserUseCase(unit_of_work).execute(login_data)


@router.post("/refresh", response_model=TokenDTO)
async def refresh_token(
    request: RefreshTokenDTO,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Exchange a refresh token for a new token pair"""
    return await RefreshTokenUseCase(unit_of_work).execute(request)
