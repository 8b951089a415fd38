"""Campaign DTOs for API requests and responses"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from ...domain.enums import CampaignStatus
from .common import MoneyDTO, TranslatableInput


class CampaignCreateDTO(BaseModel):
    """Request DTO for creating a campaign"""
    title: TranslatableInput
    description: Optional[TranslatableInput] = None
    goal_amount: Decimal = Field(..., gt=0)
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    start_date: datetime
    end_date: datetime
    organization_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    team_id: Optional[UUID] = None
    featured_image: Optional[str] = Field(None, max_length=512)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date > self.end_date:
            raise ValueError("Start date must not be after the end date")
        return self


class CampaignUpdateDTO(BaseModel):
    """Request DTO for updating a campaign"""
    title: Optional[TranslatableInput] = None
    description: Optional[TranslatableInput] = None
    goal_amount: Optional[Decimal] = Field(None, gt=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    category_id: Optional[UUID] = None
    team_id: Optional[UUID] = None
    featured_image: Optional[str] = Field(None, max_length=512)


class CampaignRejectDTO(BaseModel):
    reason: str = Field(..., min_length=1, max_length=1000)


class CampaignStatusDTO(BaseModel):
    value: str
    label: str
    color: str
    description: str

    @classmethod
    def from_status(cls, status: CampaignStatus):
        return cls(value=status.value, label=status.label, color=status.color, description=status.description)


class CampaignDTO(BaseModel):
    """Response DTO for campaign data"""
    id: UUID
    title: str
    description: str
    translations: Dict[str, Dict[str, str]]
    goal_amount: MoneyDTO
    current_amount: MoneyDTO
    remaining_amount: MoneyDTO
    progress_percentage: float
    days_remaining: int
    donations_count: int
    status: CampaignStatusDTO
    allowed_transitions: List[str]
    start_date: datetime
    end_date: datetime
    organization_id: UUID
    category_id: Optional[UUID] = None
    team_id: Optional[UUID] = None
    user_id: UUID
    featured_image: Optional[str] = None
    accepts_donations: bool
    submitted_for_approval_at: Optional[datetime] = None
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[UUID] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, campaign, locale: str = "en"):
        """Convert domain entity to DTO"""
        return cls(
            id=campaign.id.value,
            title=campaign.title.get(locale),
            description=campaign.description.get(locale),
            translations={
                "title": campaign.title.to_dict(),
                "description": campaign.description.to_dict(),
            },
            goal_amount=MoneyDTO.from_money(campaign.goal_amount),
            current_amount=MoneyDTO.from_money(campaign.current_amount),
            remaining_amount=MoneyDTO.from_money(campaign.remaining_amount),
            progress_percentage=campaign.progress_percentage,
            days_remaining=campaign.days_remaining(),
            donations_count=campaign.donations_count,
            status=CampaignStatusDTO.from_status(campaign.status),
            allowed_transitions=[status.value for status in campaign.status.allowed_transitions()],
            start_date=campaign.start_date,
            end_date=campaign.end_date,
            organization_id=campaign.organization_id.value,
            category_id=campaign.category_id.value if campaign.category_id else None,
            team_id=campaign.team_id.value if campaign.team_id else None,
            user_id=campaign.user_id.value,
            featured_image=campaign.featured_image,
            accepts_donations=campaign.can_accept_donation(),
            submitted_for_approval_at=campaign.submitted_for_approval_at,
            approved_by=campaign.approved_by.value if campaign.approved_by else None,
            approved_at=campaign.approved_at,
            rejected_by=campaign.rejected_by.value if campaign.rejected_by else None,
            rejected_at=campaign.rejected_at,
            rejection_reason=campaign.rejection_reason,
            completed_at=campaign.completed_at,
            created_at=campaign.created_at,
            updated_at=campaign.updated_at,
            deleted_at=campaign.deleted_at,
        )
