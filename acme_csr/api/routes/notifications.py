"""Notification routes"""

from uuid import UUID

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_user, get_pagination, get_unit_of_work, paginated
from ...application.dtos.common import MessageResponse
from ...application.dtos.notification_dtos import NotificationDTO, UnreadCountDTO
from ...application.use_cases.notification_use_cases import (
    DeleteNotificationUseCase,
    GetUnreadCountUseCase,
    ListMyNotificationsUseCase,
    MarkAllNotificationsReadUseCase,
    MarkNotificationUseCase,
)
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.pagination import PageRequest

router = APIRouter()


@router.get("")
async def list_notifications(
    unread_only: bool = False,
    page: PageRequest = Depends(get_pagination),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Current user's notifications, newest first"""
    return paginated(await ListMyNotificationsUseCase(unit_of_work).execute(current_user, page, unread_only))


@router.get("/unread-count", response_model=UnreadCountDTO)
async def unread_count(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await GetUnreadCountUseCase(unit_of_work).execute(current_user)


@router.post("/read-all", response_model=MessageResponse)
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    count = await MarkAllNotificationsReadUseCase(unit_of_work).execute(current_user)
    return MessageResponse(message=f"{count} notifications marked as read")


@router.post("/{notification_id}/read", response_model=NotificationDTO)
async def mark_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await MarkNotificationUseCase(unit_of_work).execute(notification_id, current_user, read=True)


@router.post("/{notification_id}/unread", response_model=NotificationDTO)
async def mark_unread(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return await MarkNotificationUseCase(unit_of_work).execute(notification_id, current_user, read=False)


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    await DeleteNotificationUseCase(unit_of_work).execute(notification_id, current_user)
    return MessageResponse(message="Notification deleted")
