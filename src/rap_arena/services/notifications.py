"""In-app notifications for likes, comments, replies and follows.

Notifications are a side effect of the action that triggers them. They are
written in their own transaction after the triggering action has committed,
and a failure to write one is logged rather than surfaced to the caller.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rap_arena.core.errors import ForbiddenError, NotFoundError
from rap_arena.models import Notification, User
from rap_arena.models.notification import (
    NOTIFICATION_BEAT_LIKE,
    NOTIFICATION_COMMENT_REPLY,
    NOTIFICATION_FOLLOW,
    NOTIFICATION_POST_COMMENT,
    NOTIFICATION_POST_LIKE,
    NOTIFICATION_RECORDING_COMMENT,
    NOTIFICATION_RECORDING_LIKE,
)

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 50

_F = TypeVar("_F", bound=Callable[..., Any])


def best_effort(func: _F) -> _F:
    """Log and swallow database errors raised while building a notification.

    The triggering action has already committed, so the caller must not see a
    failure here.
    """

    @functools.wraps(func)
    def wrapper(self: NotificationService, *args: Any, **kwargs: Any) -> Any:
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to send notification from %s", func.__name__)
            return None

    return wrapper  # type: ignore[return-value]


def _preview(content: str) -> str:
    if len(content) > PREVIEW_LENGTH:
        return content[:PREVIEW_LENGTH] + "..."
    return content


@dataclass(frozen=True)
class NotificationPage:
    """One page of a user's notifications plus paging metadata."""

    items: list[Notification]
    page: int
    limit: int
    total: int
    unread_count: int


class NotificationService:
    """Create, list and acknowledge notifications."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _send(self, **fields: Any) -> Notification | None:
        """Persist a notification unless it targets the sender or an inactive user."""
        sender_id = fields["sender_id"]
        receiver_id = fields["receiver_id"]
        if sender_id == receiver_id:
            return None

        try:
            receiver = self.db.get(User, receiver_id)
            if receiver is None or not receiver.is_active:
                return None
            notification = Notification(**fields)
            self.db.add(notification)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                "Failed to create %s notification for %s", fields.get("type"), receiver_id
            )
            return None
        return notification

    def _display_name(self, user_id: str) -> str | None:
        user = self.db.get(User, user_id)
        return user.display_name if user else None

    @best_effort
    def notify_follow(self, follower_id: str, following_id: str) -> Notification | None:
        name = self._display_name(follower_id)
        if name is None:
            return None
        return self._send(
            type=NOTIFICATION_FOLLOW,
            sender_id=follower_id,
            receiver_id=following_id,
            title="New follower",
            message=f"{name} started following you",
        )

    @best_effort
    def notify_like(
        self,
        notification_type: str,
        *,
        liker_id: str,
        owner_id: str,
        entity: Any,
    ) -> Notification | None:
        """Tell an entity's owner that someone liked it."""
        name = self._display_name(liker_id)
        if name is None:
            return None

        if notification_type == NOTIFICATION_POST_LIKE:
            return self._send(
                type=notification_type,
                sender_id=liker_id,
                receiver_id=owner_id,
                title="Someone liked your post",
                message=f"{name} liked your post",
                post_id=entity.id,
            )
        if notification_type == NOTIFICATION_RECORDING_LIKE:
            return self._send(
                type=notification_type,
                sender_id=liker_id,
                receiver_id=owner_id,
                title=f'Someone liked "{entity.title}"',
                message=f"{name} liked your recording",
                recording_id=entity.id,
            )
        if notification_type == NOTIFICATION_BEAT_LIKE:
            return self._send(
                type=notification_type,
                sender_id=liker_id,
                receiver_id=owner_id,
                title=f'Someone liked "{entity.title}"',
                message=f"{name} liked your beat",
                beat_id=entity.id,
            )
        logger.error("Unsupported like notification type: %s", notification_type)
        return None

    @best_effort
    def notify_comment(
        self,
        *,
        commenter_id: str,
        owner_id: str,
        content: str,
        post_id: str | None = None,
        recording_id: str | None = None,
        recording_title: str | None = None,
    ) -> Notification | None:
        """Tell a post or recording owner about a new top-level comment."""
        name = self._display_name(commenter_id)
        if name is None:
            return None

        if post_id is not None:
            return self._send(
                type=NOTIFICATION_POST_COMMENT,
                sender_id=commenter_id,
                receiver_id=owner_id,
                title="New comment on your post",
                message=f'{name} commented: "{_preview(content)}"',
                post_id=post_id,
            )
        return self._send(
            type=NOTIFICATION_RECORDING_COMMENT,
            sender_id=commenter_id,
            receiver_id=owner_id,
            title=f'New comment on "{recording_title}"',
            message=f'{name} commented: "{_preview(content)}"',
            recording_id=recording_id,
        )

    @best_effort
    def notify_reply(
        self,
        *,
        replier_id: str,
        parent_author_id: str,
        parent_comment_id: str,
        content: str,
    ) -> Notification | None:
        name = self._display_name(replier_id)
        if name is None:
            return None
        return self._send(
            type=NOTIFICATION_COMMENT_REPLY,
            sender_id=replier_id,
            receiver_id=parent_author_id,
            title="Someone replied to your comment",
            message=f'{name} replied: "{_preview(content)}"',
            comment_id=parent_comment_id,
        )

    def list_for(
        self,
        receiver_id: str,
        *,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
    ) -> NotificationPage:
        """Return the receiver's notifications, newest first."""
        filters = [Notification.receiver_id == receiver_id]
        if unread_only:
            filters.append(Notification.is_read.is_(False))

        items = list(
            self.db.execute(
                select(Notification)
                .where(*filters)
                .order_by(Notification.created_at.desc(), Notification.id)
                .offset((page - 1) * limit)
                .limit(limit)
            ).scalars()
        )
        total = self.db.execute(
            select(func.count()).select_from(Notification).where(*filters)
        ).scalar_one()
        unread = self.unread_count(receiver_id)
        return NotificationPage(
            items=items, page=page, limit=limit, total=int(total), unread_count=unread
        )

    def unread_count(self, receiver_id: str) -> int:
        return int(
            self.db.execute(
                select(func.count())
                .select_from(Notification)
                .where(Notification.receiver_id == receiver_id, Notification.is_read.is_(False))
            ).scalar_one()
        )

    def mark_read(self, user_id: str, notification_id: str) -> bool:
        """Mark one notification read.

        Returns:
            False if it was already read, True if this call changed it.

        Raises:
            NotFoundError: If the notification does not exist.
            ForbiddenError: If it belongs to another user.
        """
        notification = self.db.get(Notification, notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.receiver_id != user_id:
            raise ForbiddenError("Not authorized to update this notification")
        if notification.is_read:
            return False
        notification.is_read = True
        self.db.commit()
        return True

    def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification of the user read and return how many changed."""
        result = self.db.execute(
            update(Notification)
            .where(Notification.receiver_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session="evaluate")
        )
        self.db.commit()
        return int(result.rowcount)
