"""Donation domain events"""

from dataclasses import dataclass

from ..value_objects.money import Money
from ..value_objects.entity_ids import CampaignId, DonationId, UserId


@dataclass(frozen=True)
class DonationCreated:
    donation_id: DonationId
    campaign_id: CampaignId
    user_id: UserId
    amount: Money


@dataclass(frozen=True)
class DonationCompleted:
    donation_id: DonationId
    campaign_id: CampaignId
    user_id: UserId
    amount: Money
    anonymous: bool


@dataclass(frozen=True)
class DonationFailed:
    donation_id: DonationId
    campaign_id: CampaignId
    user_id: UserId
    reason: str


@dataclass(frozen=True)
class DonationRefunded:
    donation_id: DonationId
    campaign_id: CampaignId
    amount: Money
    reason: str
