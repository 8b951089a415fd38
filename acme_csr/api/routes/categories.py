"""Category routes"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_user, get_locale, get_unit_of_work
from ...application.dtos.category_dtos import CategoryDTO
from ...application.use_cases.category_use_cases import GetCategoryUseCase, ListCategoriesUseCase
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork

router = APIRouter()


@router.get("", response_model=List[CategoryDTO])
async def list_categories(
    locale: str = Depends(get_locale),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Active categories ordered by sort order"""
    return await ListCategoriesUseCase(unit_of_work).execute(locale, active_only=True)


@router.get("/{category_id}", response_model=CategoryDTO)
async def get_category(
    category_id: UUID,
    locale: str = Depends(get_locale),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetCategoryUseCase(unit_of_work).execute(category_id, locale)
