"""CRUD-style helpers for the follower graph."""
from __future__ import annotations

from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rap_arena.core.errors import NotFoundError, ValidationError
from rap_arena.models import Follow, User
from rap_arena.services.notifications import NotificationService

__all__ = [
    "follow_user",
    "unfollow_user",
    "is_following",
    "get_followers",
    "get_following",
    "count_followers",
    "count_following",
]


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def is_following(db: Session, follower_id: str | None, following_id: str) -> bool:
    """Return True when ``follower_id`` follows ``following_id``."""
    if follower_id is None:
        return False
    return db.get(Follow, (follower_id, following_id)) is not None


def follow_user(
    db: Session,
    follower_id: str,
    following_id: str,
    notifications: NotificationService | None = None,
) -> Follow:
    """Start following a user and notify them.

    Raises:
        ValidationError: On self-follow, a deactivated target, or an existing follow.
        NotFoundError: If the target user does not exist.
    """
    if follower_id == following_id:
        raise ValidationError("Cannot follow yourself")

    target = _get_user_or_404(db, following_id)
    if not target.is_active:
        raise ValidationError("Cannot follow deactivated user")
    if is_following(db, follower_id, following_id):
        raise ValidationError("Already following this user")

    follow = Follow(follower_id=follower_id, following_id=following_id)
    db.add(follow)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ValidationError("Already following this user") from err

    if notifications is not None:
        notifications.notify_follow(follower_id, following_id)
    return follow


def unfollow_user(db: Session, follower_id: str, following_id: str) -> None:
    """Stop following a user.

    Raises:
        ValidationError: If the caller was not following the user.
    """
    follow = db.get(Follow, (follower_id, following_id))
    if follow is None:
        raise ValidationError("Not following this user")
    db.delete(follow)
    db.commit()


def get_followers(db: Session, user_id: str, skip: int = 0, limit: int = 50) -> Sequence[User]:
    """Return users following ``user_id``, most recent first."""
    _get_user_or_404(db, user_id)
    stmt = (
        select(User)
        .join(Follow, Follow.follower_id == User.id)
        .where(Follow.following_id == user_id, User.is_active.is_(True))
        .order_by(Follow.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars())


def get_following(db: Session, user_id: str, skip: int = 0, limit: int = 50) -> Sequence[User]:
    """Return users that ``user_id`` follows, most recent first."""
    _get_user_or_404(db, user_id)
    stmt = (
        select(User)
        .join(Follow, Follow.following_id == User.id)
        .where(Follow.follower_id == user_id, User.is_active.is_(True))
        .order_by(Follow.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars())


def count_followers(db: Session, user_id: str) -> int:
    return int(
        db.execute(
            select(func.count()).select_from(Follow).where(Follow.following_id == user_id)
        ).scalar_one()
    )


def count_following(db: Session, user_id: str) -> int:
    return int(
        db.execute(
            select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
        ).scalar_one()
    )
