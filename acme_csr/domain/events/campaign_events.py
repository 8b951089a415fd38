"""Campaign domain events"""

from dataclasses import dataclass

from ..enums import CampaignStatus
from ..value_objects.money import Money
from ..value_objects.entity_ids import CampaignId, OrganizationId, UserId


@dataclass(frozen=True)
class CampaignCreated:
    campaign_id: CampaignId
    organization_id: OrganizationId
    user_id: UserId


@dataclass(frozen=True)
class CampaignUpdated:
    campaign_id: CampaignId


@dataclass(frozen=True)
class CampaignSubmittedForApproval:
    campaign_id: CampaignId
    user_id: UserId


@dataclass(frozen=True)
class CampaignApproved:
    campaign_id: CampaignId
    approved_by: UserId
    creator_id: UserId


@dataclass(frozen=True)
class CampaignRejected:
    campaign_id: CampaignId
    rejected_by: UserId
    creator_id: UserId
    reason: str


@dataclass(frozen=True)
class CampaignStatusChanged:
    campaign_id: CampaignId
    previous_status: CampaignStatus
    new_status: CampaignStatus


@dataclass(frozen=True)
class CampaignGoalReached:
    campaign_id: CampaignId
    creator_id: UserId
    total_raised: Money


@dataclass(frozen=True)
class CampaignDeleted:
    campaign_id: CampaignId
    permanently: bool = False
