"""Account lifecycle and profile operations for the signed-in user."""
from __future__ import annotations

import logging
from typing import Any, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rap_arena.core.errors import NotFoundError, ValidationError
from rap_arena.core.settings import settings
from rap_arena.models import Beat, Comment, Post, Recording, User
from rap_arena.services.kinds import LIKE_KINDS
from rap_arena.services.reactions import CounterMaintainer, ReactionStore
from rap_arena.services.storage import StorageService

logger = logging.getLogger(__name__)

__all__ = [
    "deactivate_account",
    "reactivate_account",
    "delete_account",
    "update_profile",
    "update_privacy",
    "list_user_posts",
]

MAX_USERNAME_LENGTH = 64


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _set_active(db: Session, user_id: str, active: bool) -> User:
    user = _get_user_or_404(db, user_id)
    if user.is_active == active:
        state = "active" if active else "deactivated"
        raise ValidationError(f"Account is already {state}")
    user.is_active = active
    db.commit()
    logger.info("User %s %s their account", user_id, "reactivated" if active else "deactivated")
    return user


def deactivate_account(db: Session, user_id: str) -> User:
    """Hide the account: it can no longer act, be followed or be notified.

    Raises:
        ValidationError: If the account is already deactivated.
    """
    return _set_active(db, user_id, False)


def reactivate_account(db: Session, user_id: str) -> User:
    """Undo a deactivation.

    Raises:
        ValidationError: If the account is already active.
    """
    return _set_active(db, user_id, True)


def _counters_to_recount(
    db: Session, user_id: str
) -> list[tuple[CounterMaintainer, Any, list[str]]]:
    """Collect counters on other content that the account's likes and comments feed."""
    pending = []
    for kind in LIKE_KINDS.values():
        ids = ReactionStore(db, kind).entity_ids_for_user(user_id)
        if ids:
            counter = CounterMaintainer(db, kind.entity_model, kind.counter_column)
            pending.append((counter, kind.entity_fk, ids))
    for model, source in ((Post, Comment.post_id), (Recording, Comment.recording_id)):
        ids = list(
            db.execute(
                select(source).where(Comment.user_id == user_id, source.is_not(None)).distinct()
            ).scalars()
        )
        if ids:
            pending.append((CounterMaintainer(db, model, "comments_count"), source, ids))
    return pending


def delete_account(db: Session, storage: StorageService, user_id: str) -> int:
    """Delete the user, their audio objects and, by cascade, everything they own.

    Every recording and beat file is removed from storage first. A removal that
    fails is queued for the cleanup worker and the account is deleted anyway.
    Like and comment counters on other users' content are recounted in the
    same transaction.

    Returns:
        Number of objects whose removal had to be queued.
    """
    user = _get_user_or_404(db, user_id)
    owned = [
        (settings.storage_recordings_bucket, path)
        for path in db.execute(
            select(Recording.file_path).where(
                Recording.user_id == user_id, Recording.file_path.is_not(None)
            )
        ).scalars()
    ] + [
        (settings.storage_beats_bucket, path)
        for path in db.execute(
            select(Beat.file_path).where(Beat.user_id == user_id, Beat.file_path.is_not(None))
        ).scalars()
    ]

    queued = 0
    for bucket, path in owned:
        if not storage.remove_or_enqueue(db, bucket, path):
            queued += 1

    pending = _counters_to_recount(db, user_id)
    try:
        db.delete(user)
        db.flush()
        for counter, source, ids in pending:
            survivors = list(
                db.execute(select(counter.model.id).where(counter.model.id.in_(ids))).scalars()
            )
            for entity_id in survivors:
                counter.reconcile(entity_id, source)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info(
        "Deleted account %s (%d files, %d queued for retry)", user_id, len(owned), queued
    )
    return queued


def update_profile(
    db: Session,
    user_id: str,
    *,
    name: str | None = None,
    username: str | None = None,
    image: str | None = None,
) -> User:
    """Update the given profile fields; ``None`` leaves a field unchanged.

    Raises:
        ValidationError: If the username is blank, too long or already taken.
    """
    user = _get_user_or_404(db, user_id)

    if username is not None:
        clean = username.strip()
        if not clean:
            raise ValidationError("Username is required")
        if len(clean) > MAX_USERNAME_LENGTH:
            raise ValidationError(f"Username is too long (max {MAX_USERNAME_LENGTH} characters)")
        taken = db.execute(
            select(User.id).where(User.username == clean, User.id != user_id)
        ).first()
        if taken is not None:
            raise ValidationError("Username already taken")
        user.username = clean
    if name is not None:
        user.name = name.strip() or None
    if image is not None:
        user.image = image.strip() or None

    db.commit()
    db.refresh(user)
    return user


def update_privacy(db: Session, user_id: str, *, hide_full_name: bool) -> User:
    """Set whether other users see the account's full name."""
    user = _get_user_or_404(db, user_id)
    user.hide_full_name = hide_full_name
    db.commit()
    db.refresh(user)
    return user


def list_user_posts(
    db: Session, user_id: str, *, page: int = 1, limit: int = 20
) -> tuple[Sequence[Post], int]:
    """Return one page of the user's posts, newest first, and the total count.

    Raises:
        NotFoundError: If the user does not exist or is deactivated.
    """
    user = _get_user_or_404(db, user_id)
    if not user.is_active:
        raise NotFoundError("User account is deactivated")

    posts = list(
        db.execute(
            select(Post)
            .where(Post.user_id == user_id)
            .order_by(Post.created_at.desc(), Post.id)
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars()
    )
    total = db.execute(
        select(func.count()).select_from(Post).where(Post.user_id == user_id)
    ).scalar_one()
    return posts, int(total)
