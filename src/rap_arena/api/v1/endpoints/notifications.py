"""Notification inbox endpoints."""

from fastapi import APIRouter, Query

from rap_arena.core.settings import settings
from rap_arena.schemas.common import MessageResponse, Pagination
from rap_arena.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
)

from ..dependencies import CurrentUserDep, NotificationServiceDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationListResponse)
async def list_notifications(
    current_user: CurrentUserDep,
    notifications: NotificationServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.notifications_page_limit, ge=1, le=100),
    unread_only: bool = Query(False),
) -> NotificationListResponse:
    """Return the caller's notifications, newest first, with the unread total."""
    result = notifications.list_for(
        current_user.id, page=page, limit=limit, unread_only=unread_only
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in result.items],
        pagination=Pagination.build(result.page, result.limit, result.total),
        unread_count=result.unread_count,
    )


@router.post("/mark-all-read", response_model=MarkAllReadResponse)
async def mark_all_read(
    current_user: CurrentUserDep,
    notifications: NotificationServiceDep,
) -> MarkAllReadResponse:
    updated = notifications.mark_all_read(current_user.id)
    return MarkAllReadResponse(message="All notifications marked as read", updated=updated)


@router.post("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: str,
    current_user: CurrentUserDep,
    notifications: NotificationServiceDep,
) -> MessageResponse:
    if notifications.mark_read(current_user.id, notification_id):
        return MessageResponse(message="Notification marked as read")
    return MessageResponse(message="Notification already read")
