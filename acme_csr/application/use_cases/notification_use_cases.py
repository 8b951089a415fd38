"""Notification use cases"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from ...domain.entities.notification import Notification
from ...domain.entities.user import User
from ...domain.enums import NotificationChannel, NotificationPriority, NotificationType
from ...domain.exceptions import NotificationException, UserException
from ...domain.repositories.job_queue import IJobQueue
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import CampaignId, NotificationId, UserId
from ...domain.value_objects.pagination import Page, PageRequest
from ..dtos.notification_dtos import NotificationCreateDTO, NotificationDTO, UnreadCountDTO

logger = logging.getLogger(__name__)

# type -> (title, message, priority, action path); formatted with the event data
NOTIFICATION_TEMPLATES: Dict[NotificationType, tuple] = {
    NotificationType.CAMPAIGN_APPROVED: (
        "Campaign approved", "Your campaign is now live and accepting donations.",
        NotificationPriority.HIGH, "/campaigns/{campaign_id}",
    ),
    NotificationType.CAMPAIGN_REJECTED: (
        "Campaign rejected", "Your campaign was rejected: {reason}",
        NotificationPriority.HIGH, "/campaigns/{campaign_id}",
    ),
    NotificationType.CAMPAIGN_GOAL_REACHED: (
        "Goal reached", "Your campaign reached its goal with {total_raised} raised.",
        NotificationPriority.HIGH, "/campaigns/{campaign_id}",
    ),
    NotificationType.DONATION_RECEIVED: (
        "New donation", "Your campaign received a donation of {amount}.",
        NotificationPriority.NORMAL, "/campaigns/{campaign_id}",
    ),
    NotificationType.DONATION_CONFIRMED: (
        "Donation confirmed", "Thank you! Your donation of {amount} was confirmed.",
        NotificationPriority.NORMAL, "/donations/{donation_id}",
    ),
    NotificationType.DONATION_FAILED: (
        "Donation failed", "Your donation could not be completed: {reason}",
        NotificationPriority.HIGH, "/donations/{donation_id}",
    ),
    NotificationType.EXPORT_COMPLETED: (
        "Export ready", "Your export is ready to download.",
        NotificationPriority.NORMAL, "/exports/{export_id}",
    ),
    NotificationType.EXPORT_FAILED: (
        "Export failed", "Your export could not be generated: {reason}",
        NotificationPriority.HIGH, "/exports/{export_id}",
    ),
    NotificationType.IMPORT_COMPLETED: (
        "Import finished", "Import finished with {successful} rows imported and {failed} failed.",
        NotificationPriority.NORMAL, "/imports/{import_id}",
    ),
}

SAMPLE_NOTIFICATIONS: List[tuple] = [
    (NotificationType.CAMPAIGN_APPROVED, "Campaign approved", "Clean Water for Schools is now live.", NotificationPriority.HIGH),
    (NotificationType.DONATION_RECEIVED, "New donation", "Your campaign received a donation of €50,00.", NotificationPriority.NORMAL),
    (NotificationType.CAMPAIGN_GOAL_REACHED, "Goal reached", "Tree Planting 2025 reached its goal.", NotificationPriority.HIGH),
    (NotificationType.SYSTEM_MAINTENANCE, "Scheduled maintenance", "The platform will be unavailable Sunday 02:00-03:00 UTC.", NotificationPriority.LOW),
    (NotificationType.SECURITY_ALERT, "New sign-in", "A new sign-in to your account was detected.", NotificationPriority.URGENT),
]


class _SafeFormat(dict):
    def __missing__(self, key):
        return ""


def _render(text: str, data: Dict[str, Any]) -> str:
    return text.format_map(_SafeFormat(data))


async def _get_own_notification(unit_of_work: IUnitOfWork, notification_id, user: User) -> Notification:
    notification = await unit_of_work.notifications.get_by_id(NotificationId.coerce(notification_id))
    if not notification:
        raise NotificationException.not_found(notification_id)
    if notification.notifiable_id != user.id:
        raise NotificationException.access_denied(notification_id)
    return notification


def _queue_mail(job_queue: Optional[IJobQueue], notification: Notification) -> None:
    if job_queue is None or notification.channel != NotificationChannel.MAIL:
        return
    countdown = None
    if not notification.can_be_sent_now() and notification.scheduled_at is not None:
        countdown = max(0, int((notification.scheduled_at - datetime.utcnow()).total_seconds()))
    job_queue.enqueue("send_notification_email", countdown=countdown, notification_id=str(notification.id))


class CreateNotificationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, job_queue: Optional[IJobQueue] = None):
        self.unit_of_work = unit_of_work
        self.job_queue = job_queue

    async def execute(self, request: NotificationCreateDTO) -> NotificationDTO:
        async with self.unit_of_work:
            recipient = await self.unit_of_work.users.get_by_id(UserId(request.notifiable_id))
            if not recipient:
                raise UserException.not_found(request.notifiable_id)
            notification = Notification.create(
                notifiable_id=recipient.id,
                type=request.type,
                title=request.title,
                message=request.message,
                channel=request.channel,
                priority=request.priority,
                data=request.data,
                scheduled_at=request.scheduled_at,
            )
            await self.unit_of_work.notifications.add(notification)
            await self.unit_of_work.commit()

        _queue_mail(self.job_queue, notification)
        return NotificationDTO.from_entity(notification)


class SendEventNotificationUseCase:
    """Builds a notification from a domain event payload"""

    def __init__(self, unit_of_work: IUnitOfWork, job_queue: Optional[IJobQueue] = None):
        self.unit_of_work = unit_of_work
        self.job_queue = job_queue

    async def execute(self, notification_type: NotificationType, data: Dict[str, Any], user_id: Optional[str] = None) -> Optional[NotificationDTO]:
        template = NOTIFICATION_TEMPLATES.get(notification_type)
        if template is None:
            logger.warning(f"No notification template for {notification_type.value}")
            return None
        title, message, priority, action_path = template

        async with self.unit_of_work:
            if user_id is None and data.get("campaign_id"):
                campaign = await self.unit_of_work.campaigns.get_by_id(CampaignId.from_str(data["campaign_id"]), with_trashed=True)
                recipient_id = campaign.user_id if campaign else None
            else:
                recipient_id = UserId.from_str(user_id) if user_id else None
            recipient = await self.unit_of_work.users.get_by_id(recipient_id) if recipient_id else None
            if recipient is None:
                logger.info(f"Skipping {notification_type.value} notification without recipient")
                return None

            notification = Notification.create(
                notifiable_id=recipient.id,
                type=notification_type,
                title=title,
                message=_render(message, data),
                channel=NotificationChannel.MAIL if priority.is_high() else NotificationChannel.DATABASE,
                priority=priority,
                data={**data, "action_path": _render(action_path, data)},
            )
            await self.unit_of_work.notifications.add(notification)
            await self.unit_of_work.commit()

        _queue_mail(self.job_queue, notification)
        return NotificationDTO.from_entity(notification)


class DeliverNotificationEmailUseCase:
    """Sends a mail-channel notification and records the outcome"""

    def __init__(self, unit_of_work: IUnitOfWork, email_service):
        self.unit_of_work = unit_of_work
        self.email_service = email_service

    async def execute(self, notification_id: UUID) -> bool:
        async with self.unit_of_work:
            notification = await self.unit_of_work.notifications.get_by_id(NotificationId.coerce(notification_id))
            if not notification:
                raise NotificationException.not_found(notification_id)
            if notification.sent_at is not None:
                return True
            recipient = await self.unit_of_work.users.get_by_id(notification.notifiable_id)
            if recipient is None:
                notification.mark_as_failed("recipient no longer exists")
                await self.unit_of_work.notifications.update(notification)
                await self.unit_of_work.commit()
                return False

            sent = await self.email_service.send_notification_email(
                to_email=str(recipient.email),
                title=notification.title,
                message=notification.message,
                action_path=notification.data.get("action_path"),
            )
            if sent:
                notification.mark_as_sent()
            else:
                notification.mark_as_failed("smtp delivery failed")
            await self.unit_of_work.notifications.update(notification)
            await self.unit_of_work.commit()
            return sent


class ListMyNotificationsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user: User, page: PageRequest, unread_only: bool = False) -> Page[NotificationDTO]:
        async with self.unit_of_work:
            result = await self.unit_of_work.notifications.list_for_user(user.id, page, unread_only)
            return Page(
                items=[NotificationDTO.from_entity(notification) for notification in result.items],
                total=result.total,
                page=result.page,
                per_page=result.per_page,
            )


class GetUnreadCountUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user: User) -> UnreadCountDTO:
        async with self.unit_of_work:
            return UnreadCountDTO(unread=await self.unit_of_work.notifications.count_unread(user.id))


class MarkNotificationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, notification_id: UUID, user: User, read: bool = True) -> NotificationDTO:
        async with self.unit_of_work:
            notification = await _get_own_notification(self.unit_of_work, notification_id, user)
            if read:
                notification.mark_as_read()
            else:
                notification.mark_as_unread()
            await self.unit_of_work.notifications.update(notification)
            await self.unit_of_work.commit()
            return NotificationDTO.from_entity(notification)


class MarkAllNotificationsReadUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user: User) -> int:
        async with self.unit_of_work:
            updated = await self.unit_of_work.notifications.mark_all_read(user.id)
            await self.unit_of_work.commit()
            return updated


class DeleteNotificationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, notification_id: UUID, user: User) -> bool:
        async with self.unit_of_work:
            notification = await _get_own_notification(self.unit_of_work, notification_id, user)
            deleted = await self.unit_of_work.notifications.delete(notification.id)
            await self.unit_of_work.commit()
            return deleted


class SendSampleNotificationsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, email: str, count: int = 5) -> List[NotificationDTO]:
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(Email(email))
            if not user:
                raise UserException.not_found(email)
            notifications = []
            for index in range(max(1, count)):
                notification_type, title, message, priority = SAMPLE_NOTIFICATIONS[index % len(SAMPLE_NOTIFICATIONS)]
                notifications.append(Notification.create(
                    notifiable_id=user.id,
                    type=notification_type,
                    title=title,
                    message=message,
                    priority=priority,
                    data={"sample": True, "sequence": index + 1},
                ))
            await self.unit_of_work.notifications.add_many(notifications)
            await self.unit_of_work.commit()
            logger.info(f"Created {len(notifications)} sample notifications for {user.id}")
            return [NotificationDTO.from_entity(notification) for notification in notifications]
