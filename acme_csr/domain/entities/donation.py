"""Donation entity with business logic"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, List

from ..enums import DonationStatus, PaymentMethod, RecurringFrequency
from ..exceptions import DonationException
from ..value_objects.entity_ids import CampaignId, DonationId, UserId
from ..value_objects.money import Money
from ..events.donation_events import DonationCreated, DonationCompleted, DonationFailed, DonationRefunded

REFUND_WINDOW_DAYS = 90
TAX_RECEIPT_MINIMUM = Decimal("20")


@dataclass
class Donation:
    id: DonationId
    campaign_id: CampaignId
    user_id: UserId
    amount: Money
    payment_method: PaymentMethod
    status: DonationStatus = DonationStatus.PENDING
    payment_gateway: Optional[str] = None
    transaction_id: Optional[str] = None
    anonymous: bool = False
    recurring: bool = False
    recurring_frequency: Optional[RecurringFrequency] = None
    notes: Optional[str] = None
    failure_reason: Optional[str] = None
    refund_reason: Optional[str] = None

    donated_at: datetime = field(default_factory=datetime.utcnow)
    processed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # Domain events
    _events: List = field(default_factory=list, init=False)

    @classmethod
    def create(
        cls,
        campaign_id: CampaignId,
        user_id: UserId,
        amount: Money,
        payment_method: PaymentMethod,
        anonymous: bool = False,
        recurring: bool = False,
        recurring_frequency: Optional[RecurringFrequency] = None,
        notes: Optional[str] = None,
        payment_gateway: Optional[str] = None,
    ) -> "Donation":
        if amount.amount <= 0:
            raise DonationException.invalid_amount()
        if recurring and recurring_frequency is None:
            raise ValueError("Recurring donations need a frequency")

        donation = cls(
            id=DonationId.generate(),
            campaign_id=campaign_id,
            user_id=user_id,
            amount=amount,
            payment_method=payment_method,
            anonymous=anonymous,
            recurring=recurring,
            recurring_frequency=recurring_frequency if recurring else None,
            notes=notes,
            payment_gateway=payment_gateway,
        )
        donation._events.append(DonationCreated(
            donation_id=donation.id,
            campaign_id=campaign_id,
            user_id=user_id,
            amount=amount,
        ))
        return donation

    def _change_status(self, new_status: DonationStatus) -> None:
        if not self.status.can_transition_to(new_status):
            raise DonationException.invalid_status_transition(self.status, new_status)
        self.status = new_status
        self.updated_at = datetime.utcnow()

    def process(self, transaction_id: str) -> None:
        """Business logic: payment handed to the gateway"""
        if not self.status.can_be_processed():
            raise DonationException.invalid_status_transition(self.status, DonationStatus.PROCESSING)
        self._change_status(DonationStatus.PROCESSING)
        self.transaction_id = transaction_id
        self.processed_at = datetime.utcnow()

    def complete(self) -> None:
        self._change_status(DonationStatus.COMPLETED)
        self.completed_at = datetime.utcnow()
        if self.processed_at is None:
            self.processed_at = self.completed_at
        self._events.append(DonationCompleted(
            donation_id=self.id,
            campaign_id=self.campaign_id,
            user_id=self.user_id,
            amount=self.amount,
            anonymous=self.anonymous,
        ))

    def fail(self, reason: str) -> None:
        self._change_status(DonationStatus.FAILED)
        self.failure_reason = reason
        self._events.append(DonationFailed(
            donation_id=self.id,
            campaign_id=self.campaign_id,
            user_id=self.user_id,
            reason=reason,
        ))

    def cancel(self, reason: Optional[str] = None) -> None:
        if not self.status.can_be_cancelled():
            raise DonationException.invalid_status_transition(self.status, DonationStatus.CANCELLED)
        self._change_status(DonationStatus.CANCELLED)
        self.cancelled_at = datetime.utcnow()
        if reason:
            self.notes = f"Cancelled: {reason}"

    def can_be_refunded(self, now: Optional[datetime] = None) -> bool:
        if not self.status.can_be_refunded() or self.processed_at is None:
            return False
        now = now or datetime.utcnow()
        return now - self.processed_at <= timedelta(days=REFUND_WINDOW_DAYS)

    def refund(self, reason: str) -> None:
        if not self.status.can_be_refunded():
            raise DonationException.invalid_status_transition(self.status, DonationStatus.REFUNDED)
        if not self.can_be_refunded():
            raise DonationException.refund_window_expired(self.id.value)
        self._change_status(DonationStatus.REFUNDED)
        self.refunded_at = datetime.utcnow()
        self.refund_reason = reason
        self._events.append(DonationRefunded(
            donation_id=self.id,
            campaign_id=self.campaign_id,
            amount=self.amount,
            reason=reason,
        ))

    def is_successful(self) -> bool:
        return self.status.is_successful()

    def is_eligible_for_tax_receipt(self) -> bool:
        return (
            self.status == DonationStatus.COMPLETED
            and self.amount.amount >= TAX_RECEIPT_MINIMUM
            and not self.anonymous
        )

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events
