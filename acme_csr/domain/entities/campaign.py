"""Campaign entity with business logic"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from ..enums import CampaignStatus
from ..exceptions import CampaignException
from ..value_objects.entity_ids import CampaignId, CategoryId, OrganizationId, TeamId, UserId
from ..value_objects.money import Money
from ..value_objects.translatable import TranslatableText
from ..events.campaign_events import (
    CampaignCreated,
    CampaignUpdated,
    CampaignDeleted,
    CampaignSubmittedForApproval,
    CampaignApproved,
    CampaignRejected,
    CampaignStatusChanged,
    CampaignGoalReached,
)


@dataclass
class Campaign:
    id: CampaignId
    title: TranslatableText
    description: TranslatableText
    goal_amount: Money
    start_date: datetime
    end_date: datetime
    organization_id: OrganizationId
    user_id: UserId
    current_amount: Optional[Money] = None
    status: CampaignStatus = CampaignStatus.DRAFT
    category_id: Optional[CategoryId] = None
    team_id: Optional[TeamId] = None
    donations_count: int = 0
    featured_image: Optional[str] = None

    # Approval workflow
    submitted_for_approval_at: Optional[datetime] = None
    approved_by: Optional[UserId] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[UserId] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    completed_at: Optional[datetime] = None

    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    deleted_at: Optional[datetime] = None

    # Domain events
    _events: List = field(default_factory=list, init=False)

    def __post_init__(self):
        if self.current_amount is None:
            self.current_amount = Money.zero(self.goal_amount.currency)

    @classmethod
    def create(
        cls,
        title: TranslatableText,
        description: TranslatableText,
        goal_amount: Money,
        start_date: datetime,
        end_date: datetime,
        organization_id: OrganizationId,
        user_id: UserId,
        category_id: Optional[CategoryId] = None,
        team_id: Optional[TeamId] = None,
        featured_image: Optional[str] = None,
    ) -> "Campaign":
        if title.is_blank():
            raise ValueError("Campaign title cannot be empty")
        campaign = cls(
            id=CampaignId.generate(),
            title=title,
            description=description,
            goal_amount=goal_amount,
            start_date=start_date,
            end_date=end_date,
            organization_id=organization_id,
            user_id=user_id,
            category_id=category_id,
            team_id=team_id,
            featured_image=featured_image,
        )
        campaign.validate_date_range()
        campaign.validate_goal_amount()
        campaign._events.append(CampaignCreated(
            campaign_id=campaign.id,
            organization_id=organization_id,
            user_id=user_id,
        ))
        return campaign

    def validate_date_range(self) -> None:
        if self.start_date > self.end_date:
            raise CampaignException.invalid_date_range()

    def validate_goal_amount(self) -> None:
        if self.goal_amount.amount <= 0:
            raise CampaignException.invalid_goal_amount()

    def update_details(
        self,
        title: Optional[TranslatableText] = None,
        description: Optional[TranslatableText] = None,
        goal_amount: Optional[Money] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        category_id: Optional[CategoryId] = None,
        team_id: Optional[TeamId] = None,
        featured_image: Optional[str] = None,
    ) -> None:
        if title is not None:
            merged = self.title.merge(title)
            if merged.is_blank():
                raise ValueError("Campaign title cannot be empty")
            self.title = merged
        if description is not None:
            self.description = self.description.merge(description)
        if goal_amount is not None:
            if goal_amount.currency != self.current_amount.currency:
                raise ValueError("Goal currency cannot change once the campaign exists")
            self.goal_amount = goal_amount
        if start_date is not None:
            self.start_date = start_date
        if end_date is not None:
            self.end_date = end_date
        if category_id is not None:
            self.category_id = category_id
        if team_id is not None:
            self.team_id = team_id
        if featured_image is not None:
            self.featured_image = featured_image

        self.validate_date_range()
        self.validate_goal_amount()
        self.updated_at = datetime.utcnow()
        self._events.append(CampaignUpdated(campaign_id=self.id))

    # Status workflow

    def _change_status(self, new_status: CampaignStatus) -> None:
        if not self.status.can_transition_to(new_status):
            raise CampaignException.invalid_status_transition(self.status, new_status)
        previous = self.status
        self.status = new_status
        self.updated_at = datetime.utcnow()
        self._events.append(CampaignStatusChanged(
            campaign_id=self.id,
            previous_status=previous,
            new_status=new_status,
        ))

    def submit_for_approval(self) -> None:
        self._change_status(CampaignStatus.PENDING_APPROVAL)
        self.submitted_for_approval_at = datetime.utcnow()
        self._events.append(CampaignSubmittedForApproval(campaign_id=self.id, user_id=self.user_id))

    def approve(self, approver_id: UserId) -> None:
        self._change_status(CampaignStatus.ACTIVE)
        self.approved_by = approver_id
        self.approved_at = datetime.utcnow()
        self.rejected_by = None
        self.rejected_at = None
        self.rejection_reason = None
        self._events.append(CampaignApproved(campaign_id=self.id, approved_by=approver_id, creator_id=self.user_id))

    def reject(self, rejector_id: UserId, reason: str) -> None:
        if not reason or not reason.strip():
            raise ValueError("A rejection reason is required")
        self._change_status(CampaignStatus.REJECTED)
        self.rejected_by = rejector_id
        self.rejected_at = datetime.utcnow()
        self.rejection_reason = reason.strip()
        self._events.append(CampaignRejected(
            campaign_id=self.id,
            rejected_by=rejector_id,
            creator_id=self.user_id,
            reason=self.rejection_reason,
        ))

    def return_to_draft(self) -> None:
        self._change_status(CampaignStatus.DRAFT)

    def pause(self) -> None:
        self._change_status(CampaignStatus.PAUSED)

    def resume(self) -> None:
        self._change_status(CampaignStatus.ACTIVE)

    def complete(self) -> None:
        self._change_status(CampaignStatus.COMPLETED)
        self.completed_at = datetime.utcnow()

    def cancel(self) -> None:
        self._change_status(CampaignStatus.CANCELLED)

    def expire(self) -> None:
        self._change_status(CampaignStatus.EXPIRED)

    # Donations

    def is_active(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.utcnow()
        return (
            self.status == CampaignStatus.ACTIVE
            and self.start_date <= now
            and self.end_date > now
            and self.deleted_at is None
        )

    def can_accept_donation(self, now: Optional[datetime] = None) -> bool:
        return self.is_active(now)

    def add_donation(self, amount: Money) -> None:
        """Business logic: count a completed donation towards the goal"""
        if not self.can_accept_donation():
            raise CampaignException.cannot_accept_donation(self.id.value)

        self.current_amount = self.current_amount.add(amount)
        self.updated_at = datetime.utcnow()

        if self.has_reached_goal():
            self._events.append(CampaignGoalReached(
                campaign_id=self.id,
                creator_id=self.user_id,
                total_raised=self.current_amount,
            ))
            self.complete()

    def remove_donation(self, amount: Money) -> None:
        """Refunds take the amount back out, bottoming at zero"""
        if amount.amount >= self.current_amount.amount:
            self.current_amount = Money.zero(self.current_amount.currency)
        else:
            self.current_amount = self.current_amount.subtract(amount)
        self.updated_at = datetime.utcnow()

    def has_reached_goal(self) -> bool:
        return self.current_amount.amount >= self.goal_amount.amount

    @property
    def progress_percentage(self) -> float:
        if self.goal_amount.amount <= 0:
            return 0.0
        percentage = self.current_amount.amount / self.goal_amount.amount * Decimal(100)
        return float(min(Decimal(100), percentage).quantize(Decimal("0.01")))

    @property
    def remaining_amount(self) -> Money:
        if self.has_reached_goal():
            return Money.zero(self.goal_amount.currency)
        return self.goal_amount.subtract(self.current_amount)

    def days_remaining(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        return max(0, (self.end_date - now).days)

    def is_awaiting_approval(self) -> bool:
        return self.status == CampaignStatus.PENDING_APPROVAL

    def was_approved(self) -> bool:
        return self.approved_at is not None

    def was_rejected(self) -> bool:
        return self.status == CampaignStatus.REJECTED and self.rejected_at is not None

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.user_id == user_id

    def is_trashed(self) -> bool:
        return self.deleted_at is not None

    def mark_deleted(self, permanently: bool = False) -> None:
        if not permanently:
            self.deleted_at = datetime.utcnow()
        self._events.append(CampaignDeleted(campaign_id=self.id, permanently=permanently))

    def restore(self) -> None:
        if self.deleted_at is None:
            raise CampaignException.not_trashed(self.id.value)
        self.deleted_at = None
        self.updated_at = datetime.utcnow()
        self._events.append(CampaignUpdated(campaign_id=self.id))

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events
