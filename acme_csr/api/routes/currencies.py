"""Currency routes"""

from typing import List

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_user, get_unit_of_work
from ...application.dtos.currency_dtos import ConversionResultDTO, ConvertCurrencyDTO, CurrencyDTO
from ...application.use_cases.currency_use_cases import (
    ConvertCurrencyUseCase,
    GetCurrencyUseCase,
    ListCurrenciesUseCase,
)
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork

router = APIRouter()


@router.get("", response_model=List[CurrencyDTO])
async def list_currencies(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await ListCurrenciesUseCase(unit_of_work).execute(active_only=True)


@router.post("/convert", response_model=ConversionResultDTO)
async def convert_amount(
    request: ConvertCurrencyDTO,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Convert an amount between two active currencies"""
    return await ConvertCurrencyUseCase(unit_of_work).execute(request)


@router.get("/{code}", response_model=CurrencyDTO)
async def get_currency(
    code: str,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetCurrencyUseCase(unit_of_work).execute(code)
