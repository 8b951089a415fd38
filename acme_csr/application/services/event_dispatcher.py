"""Turns committed domain events into background jobs"""

import logging
from typing import Any, Callable, Dict, Iterable

from ...domain.enums import NotificationType, SearchableEntity
from ...domain.events.campaign_events import (
    CampaignApproved,
    CampaignCreated,
    CampaignDeleted,
    CampaignGoalReached,
    CampaignRejected,
    CampaignStatusChanged,
    CampaignSubmittedForApproval,
    CampaignUpdated,
)
from ...domain.events.donation_events import DonationCompleted, DonationCreated, DonationFailed, DonationRefunded
from ...domain.events.job_events import ExportCompleted, ExportFailed, ExportRequested, ImportCompleted
from ...domain.events.organization_events import (
    OrganizationCreated,
    OrganizationDeactivated,
    OrganizationUpdated,
    OrganizationVerified,
    TenantProvisioningRequested,
)
from ...domain.events.user_events import UserRegistered, UserRoleChanged, UserSuspended
from ...domain.repositories.job_queue import IJobQueue

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Maps each event type to the jobs it triggers"""

    def __init__(self, job_queue: IJobQueue):
        self.job_queue = job_queue
        self._handlers: Dict[type, Callable[[Any], None]] = {
            CampaignCreated: self._reindex_campaign,
            CampaignUpdated: self._reindex_campaign,
            CampaignStatusChanged: self._reindex_campaign,
            CampaignSubmittedForApproval: self._reindex_campaign,
            CampaignApproved: self._on_campaign_approved,
            CampaignRejected: self._on_campaign_rejected,
            CampaignGoalReached: self._on_goal_reached,
            CampaignDeleted: self._on_campaign_deleted,
            DonationCreated: self._reindex_donation,
            DonationCompleted: self._on_donation_completed,
            DonationFailed: self._on_donation_failed,
            DonationRefunded: self._reindex_donation,
            OrganizationCreated: self._reindex_organization,
            OrganizationUpdated: self._reindex_organization,
            OrganizationVerified: self._reindex_organization,
            OrganizationDeactivated: self._reindex_organization,
            TenantProvisioningRequested: self._on_provisioning_requested,
            UserRegistered: self._reindex_user,
            UserRoleChanged: self._reindex_user,
            UserSuspended: self._reindex_user,
            ExportRequested: self._on_export_requested,
            ExportCompleted: self._on_export_completed,
            ExportFailed: self._on_export_failed,
            ImportCompleted: self._on_import_completed,
        }

    def publish(self, events: Iterable[Any]) -> None:
        for event in events:
            handler = self._handlers.get(type(event))
            if handler is None:
                continue
            try:
                handler(event)
            except Exception as e:
                # Already committed
                logger.error(f"Failed to dispatch {type(event).__name__}: {e}")

    def _index(self, entity: SearchableEntity, entity_id) -> None:
        self.job_queue.enqueue("index_entity", entity=entity.value, entity_id=str(entity_id))

    def _notify(self, notification_type: NotificationType, data: Dict[str, Any], user_id=None) -> None:
        self.job_queue.enqueue(
            "send_event_notification",
            notification_type=notification_type.value,
            user_id=str(user_id) if user_id is not None else None,
            data=data,
        )

    def _reindex_campaign(self, event) -> None:
        self._index(SearchableEntity.CAMPAIGNS, event.campaign_id)

    def _reindex_donation(self, event) -> None:
        self._index(SearchableEntity.DONATIONS, event.donation_id)

    def _reindex_organization(self, event) -> None:
        self._index(SearchableEntity.ORGANIZATIONS, event.organization_id)

    def _reindex_user(self, event) -> None:
        self._index(SearchableEntity.USERS, event.user_id)

    def _on_campaign_approved(self, event: CampaignApproved) -> None:
        self._reindex_campaign(event)
        self._notify(NotificationType.CAMPAIGN_APPROVED, {"campaign_id": str(event.campaign_id)}, event.creator_id)

    def _on_campaign_rejected(self, event: CampaignRejected) -> None:
        self._reindex_campaign(event)
        self._notify(
            NotificationType.CAMPAIGN_REJECTED,
            {"campaign_id": str(event.campaign_id), "reason": event.reason},
            event.creator_id,
        )

    def _on_goal_reached(self, event: CampaignGoalReached) -> None:
        self._notify(
            NotificationType.CAMPAIGN_GOAL_REACHED,
            {"campaign_id": str(event.campaign_id), "total_raised": event.total_raised.format()},
            event.creator_id,
        )

    def _on_campaign_deleted(self, event: CampaignDeleted) -> None:
        self.job_queue.enqueue(
            "remove_entity", entity=SearchableEntity.CAMPAIGNS.value, entity_id=str(event.campaign_id)
        )

    def _on_donation_completed(self, event: DonationCompleted) -> None:
        self._reindex_donation(event)
        self._reindex_campaign(event)
        # Recipient is the campaign creator, looked up by the job
        self._notify(
            NotificationType.DONATION_RECEIVED,
            {
                "campaign_id": str(event.campaign_id),
                "donation_id": str(event.donation_id),
                "amount": event.amount.format(),
                "anonymous": event.anonymous,
            },
        )
        self._notify(
            NotificationType.DONATION_CONFIRMED,
            {"donation_id": str(event.donation_id), "amount": event.amount.format()},
            event.user_id,
        )

    def _on_donation_failed(self, event: DonationFailed) -> None:
        self._reindex_donation(event)
        self._notify(
            NotificationType.DONATION_FAILED,
            {"donation_id": str(event.donation_id), "reason": event.reason},
            event.user_id,
        )

    def _on_provisioning_requested(self, event: TenantProvisioningRequested) -> None:
        self.job_queue.enqueue("provision_tenant", target_tenant_id=str(event.tenant_id), tenant_id=None)

    def _on_export_requested(self, event: ExportRequested) -> None:
        self.job_queue.enqueue("process_export", export_id=str(event.export_id))

    def _on_export_completed(self, event: ExportCompleted) -> None:
        self._notify(
            NotificationType.EXPORT_COMPLETED,
            {"export_id": str(event.export_id), "file_size": event.file_size},
            event.user_id,
        )

    def _on_export_failed(self, event: ExportFailed) -> None:
        self._notify(
            NotificationType.EXPORT_FAILED,
            {"export_id": str(event.export_id), "reason": event.reason},
            event.user_id,
        )

    def _on_import_completed(self, event: ImportCompleted) -> None:
        self._notify(
            NotificationType.IMPORT_COMPLETED,
            {
                "import_id": str(event.import_id),
                "successful": event.successful,
                "failed": event.failed,
                "error": event.error,
            },
            event.user_id,
        )

