"""Donation DTOs for API requests and responses"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ...domain.enums import PaymentMethod, RecurringFrequency
from .common import MoneyDTO


class DonationCreateDTO(BaseModel):
    """Request DTO for creating a donation"""
    campaign_id: UUID
    amount: Decimal = Field(..., gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    payment_method: PaymentMethod
    payment_gateway: Optional[str] = Field(None, max_length=32)
    anonymous: bool = False
    recurring: bool = False
    recurring_frequency: Optional[RecurringFrequency] = None
    notes: Optional[str] = Field(None, max_length=1000)


class DonationProcessDTO(BaseModel):
    transaction_id: str = Field(..., min_length=1, max_length=255)


class DonationReasonDTO(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class DonationCancelDTO(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class DonationDTO(BaseModel):
    """Response DTO for donation data"""
    id: UUID
    campaign_id: UUID
    user_id: Optional[UUID] = None
    amount: MoneyDTO
    payment_method: str
    payment_gateway: Optional[str] = None
    transaction_id: Optional[str] = None
    status: str
    status_label: str
    progress_percentage: int
    anonymous: bool
    recurring: bool
    recurring_frequency: Optional[str] = None
    notes: Optional[str] = None
    failure_reason: Optional[str] = None
    refund_reason: Optional[str] = None
    eligible_for_tax_receipt: bool
    donated_at: datetime
    processed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, donation, hide_donor: bool = False):
        """Anonymous donations hide the donor from everyone but the donor"""
        return cls(
            id=donation.id.value,
            campaign_id=donation.campaign_id.value,
            user_id=None if hide_donor and donation.anonymous else donation.user_id.value,
            amount=MoneyDTO.from_money(donation.amount),
            payment_method=donation.payment_method.value,
            payment_gateway=donation.payment_gateway,
            transaction_id=donation.transaction_id,
            status=donation.status.value,
            status_label=donation.status.label,
            progress_percentage=donation.status.progress_percentage,
            anonymous=donation.anonymous,
            recurring=donation.recurring,
            recurring_frequency=donation.recurring_frequency.value if donation.recurring_frequency else None,
            notes=donation.notes,
            failure_reason=donation.failure_reason,
            refund_reason=donation.refund_reason,
            eligible_for_tax_receipt=donation.is_eligible_for_tax_receipt(),
            donated_at=donation.donated_at,
            processed_at=donation.processed_at,
            completed_at=donation.completed_at,
            cancelled_at=donation.cancelled_at,
            refunded_at=donation.refunded_at,
        )
