"""Campaign workflow and donation accounting"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from acme_csr.domain.entities.campaign import Campaign
from acme_csr.domain.enums import CampaignStatus
from acme_csr.domain.events.campaign_events import CampaignGoalReached
from acme_csr.domain.exceptions import CampaignException
from acme_csr.domain.value_objects.entity_ids import OrganizationId, UserId
from acme_csr.domain.value_objects.money import Money
from acme_csr.domain.value_objects.translatable import TranslatableText

pytestmark = pytest.mark.unit


def _campaign(goal="100", start_offset=-1, end_offset=10):
    now = datetime.utcnow()
    return Campaign.create(
        title=TranslatableText({"en": "School Books"}),
        description=TranslatableText({"en": "Books for a rural school"}),
        goal_amount=Money(Decimal(goal), "EUR"),
        start_date=now + timedelta(days=start_offset),
        end_date=now + timedelta(days=end_offset),
        organization_id=OrganizationId.generate(),
        user_id=UserId.generate(),
    )


def _active_campaign(goal="100"):
    campaign = _campaign(goal)
    campaign.submit_for_approval()
    campaign.approve(UserId.generate())
    return campaign


class TestCampaignStatusTable:

    @pytest.mark.parametrize("current,target,allowed", [
        (CampaignStatus.DRAFT, CampaignStatus.PENDING_APPROVAL, True),
        (CampaignStatus.DRAFT, CampaignStatus.ACTIVE, False),
        (CampaignStatus.PENDING_APPROVAL, CampaignStatus.REJECTED, True),
        (CampaignStatus.REJECTED, CampaignStatus.DRAFT, True),
        (CampaignStatus.ACTIVE, CampaignStatus.PAUSED, True),
        (CampaignStatus.PAUSED, CampaignStatus.COMPLETED, False),
        (CampaignStatus.COMPLETED, CampaignStatus.ACTIVE, False),
        (CampaignStatus.EXPIRED, CampaignStatus.ACTIVE, False),
    ])
    def test_transitions(self, current, target, allowed):
        assert current.can_transition_to(target) is allowed

    def test_final_statuses(self):
        finals = {status for status in CampaignStatus if status.is_final()}
        assert finals == {CampaignStatus.COMPLETED, CampaignStatus.CANCELLED, CampaignStatus.EXPIRED}


class TestCampaignWorkflow:

    def test_create_rejects_inverted_dates(self):
        with pytest.raises(CampaignException):
            _campaign(start_offset=5, end_offset=1)

    def test_create_rejects_zero_goal(self):
        with pytest.raises(CampaignException):
            _campaign(goal="0")

    def test_approval_flow(self):
        campaign = _campaign()
        campaign.submit_for_approval()
        approver = UserId.generate()
        campaign.approve(approver)
        assert campaign.status == CampaignStatus.ACTIVE
        assert campaign.approved_by == approver

    def test_draft_cannot_be_activated_directly(self):
        campaign = _campaign()
        with pytest.raises(CampaignException) as exc_info:
            campaign.resume()
        assert exc_info.value.status_code == 409

    def test_reject_requires_reason(self):
        campaign = _campaign()
        campaign.submit_for_approval()
        with pytest.raises(ValueError):
            campaign.reject(UserId.generate(), "  ")

    def test_rejection_clears_on_approval(self):
        campaign = _campaign()
        campaign.submit_for_approval()
        campaign.reject(UserId.generate(), "Missing budget")
        campaign.submit_for_approval()
        campaign.approve(UserId.generate())
        assert campaign.rejection_reason is None


class TestCampaignDonations:

    def test_inactive_campaign_refuses_donations(self):
        campaign = _campaign()
        with pytest.raises(CampaignException):
            campaign.add_donation(Money(10, "EUR"))

    def test_reaching_goal_completes_campaign(self):
        campaign = _active_campaign(goal="100")
        campaign.add_donation(Money(60, "EUR"))
        assert campaign.status == CampaignStatus.ACTIVE
        campaign.add_donation(Money(40, "EUR"))
        assert campaign.status == CampaignStatus.COMPLETED
        assert any(isinstance(event, CampaignGoalReached) for event in campaign.get_events())

    def test_progress_is_capped_at_hundred(self):
        campaign = _active_campaign(goal="100")
        campaign.current_amount = Money(150, "EUR")
        assert campaign.progress_percentage == 100.0
        assert campaign.remaining_amount.is_zero()

    def test_refund_bottoms_at_zero(self):
        campaign = _active_campaign()
        campaign.add_donation(Money(30, "EUR"))
        campaign.remove_donation(Money(50, "EUR"))
        assert campaign.current_amount.is_zero()
