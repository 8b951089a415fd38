"""Donation routes"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import get_current_user, get_pagination, get_unit_of_work, paginated
from ...application.dtos.donation_dtos import (
    DonationCancelDTO,
    DonationCreateDTO,
    DonationDTO,
    DonationProcessDTO,
    DonationReasonDTO,
)
from ...application.use_cases.donation_use_cases import (
    CancelDonationUseCase,
    CompleteDonationUseCase,
    CreateDonationUseCase,
    FailDonationUseCase,
    GetDonationUseCase,
    ListDonationsUseCase,
    ListMyDonationsUseCase,
    ProcessDonationUseCase,
    RefundDonationUseCase,
)
from ...domain.entities.user import User
from ...domain.enums import DonationStatus
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.pagination import PageRequest

router = APIRouter()


@router.post("", response_model=DonationDTO, status_code=status.HTTP_201_CREATED)
async def create_donation(
    request: DonationCreateDTO,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Pledge a donation to an active campaign"""
    return await CreateDonationUseCase(unit_of_work).execute(request, current_user)


@router.get("")
async def list_donations(
    status_filter: Optional[DonationStatus] = Query(None, alias="status"),
    page: PageRequest = Depends(get_pagination),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """All donations visible to the caller"""
    return paginated(await ListDonationsUseCase(unit_of_work).execute(current_user, page, status_filter))


@router.get("/mine")
async def list_my_donations(
    page: PageRequest = Depends(get_pagination),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return paginated(await ListMyDonationsUseCase(unit_of_work).execute(current_user, page))


@router.get("/{donation_id}", response_model=DonationDTO)
async def get_donation(
    donation_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetDonationUseCase(unit_of_work).execute(donation_id, current_user)


@router.post("/{donation_id}/process", response_model=DonationDTO)
async def process_donation(
    donation_id: UUID,
    request: DonationProcessDTO,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await ProcessDonationUseCase(unit_of_work).execute(donation_id, request, current_user)


@router.post("/{donation_id}/complete", response_model=DonationDTO)
async def complete_donation(
    donation_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await CompleteDonationUseCase(unit_of_work).execute(donation_id, current_user)


@router.post("/{donation_id}/fail", response_model=DonationDTO)
async def fail_donation(
    donation_id: UUID,
    request: DonationReasonDTO,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await FailDonationUseCase(unit_of_work).execute(donation_id, request, current_user)


@router.post("/{donation_id}/cancel", response_model=DonationDTO)
async def cancel_donation(
    donation_id: UUID,
    request: DonationCancelDTO,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Cancel a pending or processing donation"""
    return await CancelDonationUseCase(unit_of_work).execute(donation_id, request, current_user)


@router.post("/{donation_id}/refund", response_model=DonationDTO)
async def refund_donation(
    donation_id: UUID,
    request: DonationReasonDTO,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Refund a completed donation; the campaign total is reduced"""
    return await RefundDonationUseCase(unit_of_work).execute(donation_id, request, current_user)
