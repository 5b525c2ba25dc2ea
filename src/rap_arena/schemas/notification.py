"""Notification Pydantic schemas."""

from datetime import datetime

from .common import CamelModel, Pagination
from .user import UserSummary


class NotificationResponse(CamelModel):
    id: str
    type: str
    title: str
    message: str
    is_read: bool
    created_at: datetime
    sender: UserSummary
    post_id: str | None = None
    recording_id: str | None = None
    beat_id: str | None = None
    comment_id: str | None = None


class NotificationListResponse(CamelModel):
    notifications: list[NotificationResponse]
    pagination: Pagination
    unread_count: int


class MarkAllReadResponse(CamelModel):
    message: str
    updated: int
