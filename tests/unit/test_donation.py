"""Donation lifecycle"""

from datetime import datetime, timedelta

import pytest

from acme_csr.domain.entities.donation import Donation
from acme_csr.domain.enums import DonationStatus, PaymentMethod
from acme_csr.domain.exceptions import DonationException
from acme_csr.domain.value_objects.entity_ids import CampaignId, UserId
from acme_csr.domain.value_objects.money import Money

pytestmark = pytest.mark.unit


def _donation(amount=25):
    return Donation.create(
        campaign_id=CampaignId.generate(),
        user_id=UserId.generate(),
        amount=Money(amount, "EUR"),
        payment_method=PaymentMethod.CARD,
    )


class TestDonationStatusTable:

    @pytest.mark.parametrize("current,target,allowed", [
        (DonationStatus.PENDING, DonationStatus.PROCESSING, True),
        (DonationStatus.PENDING, DonationStatus.COMPLETED, False),
        (DonationStatus.PROCESSING, DonationStatus.COMPLETED, True),
        (DonationStatus.COMPLETED, DonationStatus.REFUNDED, True),
        (DonationStatus.COMPLETED, DonationStatus.CANCELLED, False),
        (DonationStatus.REFUNDED, DonationStatus.COMPLETED, False),
    ])
    def test_transitions(self, current, target, allowed):
        assert current.can_transition_to(target) is allowed


class TestDonation:

    def test_zero_amount_is_rejected(self):
        with pytest.raises(DonationException):
            _donation(amount=0)

    def test_recurring_needs_frequency(self):
        with pytest.raises(ValueError):
            Donation.create(
                campaign_id=CampaignId.generate(),
                user_id=UserId.generate(),
                amount=Money(10, "EUR"),
                payment_method=PaymentMethod.PAYPAL,
                recurring=True,
            )

    def test_process_then_complete(self):
        donation = _donation()
        donation.process("txn_123")
        donation.complete()
        assert donation.status == DonationStatus.COMPLETED
        assert donation.transaction_id == "txn_123"
        assert donation.completed_at is not None

    def test_pending_cannot_complete(self):
        donation = _donation()
        with pytest.raises(DonationException):
            donation.complete()

    def test_completed_cannot_be_cancelled(self):
        donation = _donation()
        donation.process("txn_1")
        donation.complete()
        with pytest.raises(DonationException):
            donation.cancel("changed my mind")

    def test_refund_outside_window_is_rejected(self):
        donation = _donation()
        donation.process("txn_2")
        donation.complete()
        donation.processed_at = datetime.utcnow() - timedelta(days=365)
        assert donation.can_be_refunded() is False
        with pytest.raises(DonationException):
            donation.refund("duplicate")

    def test_refund_inside_window(self):
        donation = _donation()
        donation.process("txn_3")
        donation.complete()
        donation.refund("duplicate charge")
        assert donation.status == DonationStatus.REFUNDED
        assert donation.refund_reason == "duplicate charge"
