"""Comments and replies on posts and recordings."""
from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rap_arena.core.errors import NotFoundError, ValidationError
from rap_arena.core.settings import settings
from rap_arena.models import Comment, Post, Recording
from rap_arena.services.content import hidden_from
from rap_arena.services.notifications import NotificationService
from rap_arena.services.reactions import CounterMaintainer

COMMENT_TARGETS: dict[str, type[Post] | type[Recording]] = {
    "posts": Post,
    "recordings": Recording,
}


@dataclass
class CommentThread:
    """A top-level comment with its replies, oldest reply first."""

    comment: Comment
    replies: list[Comment] = field(default_factory=list)


def _validate_content(content: str) -> str:
    text = content.strip()
    if not text:
        raise ValidationError("Comment content is required")
    if len(text) > settings.max_comment_length:
        raise ValidationError(
            f"Comment is too long (max {settings.max_comment_length} characters)"
        )
    return text


def _target_column(target: str):
    return Comment.post_id if target == "posts" else Comment.recording_id


class CommentService:
    """Write comments and keep the target's ``comments_count`` in step."""

    def __init__(self, db: Session, notifications: NotificationService | None = None) -> None:
        self.db = db
        self.notifications = notifications

    def _get_target_or_404(
        self, target: str, target_id: str, viewer_id: str | None = None
    ) -> Post | Recording:
        model = COMMENT_TARGETS.get(target)
        if model is None:
            raise NotFoundError(f"Unknown content kind '{target}'")
        entity = self.db.get(model, target_id)
        if entity is None or hidden_from(self.db, entity, viewer_id):
            raise NotFoundError(f"{model.__name__} not found")
        return entity

    def _insert(self, comment: Comment, target: Post | Recording) -> Comment:
        counter = CounterMaintainer(self.db, type(target), "comments_count")
        try:
            self.db.add(comment)
            self.db.flush()
            counter.increment(target.id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(comment)
        return comment

    def add_comment(self, user_id: str, target: str, target_id: str, content: str) -> Comment:
        """Add a top-level comment to a post or recording."""
        entity = self._get_target_or_404(target, target_id, user_id)
        text = _validate_content(content)
        comment = Comment(user_id=user_id, content=text)
        if isinstance(entity, Post):
            comment.post_id = entity.id
            target_ref = {"post_id": entity.id}
        else:
            comment.recording_id = entity.id
            target_ref = {"recording_id": entity.id, "recording_title": entity.title}
        owner_id = entity.user_id
        comment = self._insert(comment, entity)

        if self.notifications is not None:
            self.notifications.notify_comment(
                commenter_id=user_id,
                owner_id=owner_id,
                content=text,
                **target_ref,
            )
        return comment

    def reply(self, user_id: str, parent_id: str, content: str) -> Comment:
        """Reply to a comment; the reply joins the parent's post or recording."""
        parent = self.db.get(Comment, parent_id)
        if parent is None or hidden_from(self.db, parent, user_id):
            raise NotFoundError("Comment not found")
        text = _validate_content(content)

        if parent.post_id is not None:
            target: Post | Recording = self._get_target_or_404("posts", parent.post_id)
        else:
            target = self._get_target_or_404("recordings", parent.recording_id or "")

        reply = Comment(
            user_id=user_id,
            content=text,
            post_id=parent.post_id,
            recording_id=parent.recording_id,
            parent_id=parent.id,
        )
        parent_author_id = parent.user_id
        reply = self._insert(reply, target)

        if self.notifications is not None:
            self.notifications.notify_reply(
                replier_id=user_id,
                parent_author_id=parent_author_id,
                parent_comment_id=parent_id,
                content=text,
            )
        return reply

    def list_threads(
        self,
        target: str,
        target_id: str,
        *,
        viewer_id: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[CommentThread]:
        """Return top-level comments newest first, each with its replies."""
        self._get_target_or_404(target, target_id, viewer_id)
        column = _target_column(target)
        top_level = list(
            self.db.execute(
                select(Comment)
                .where(column == target_id, Comment.parent_id.is_(None))
                .order_by(Comment.created_at.desc())
                .offset(offset)
                .limit(limit)
            ).scalars()
        )
        if not top_level:
            return []

        threads = {comment.id: CommentThread(comment=comment) for comment in top_level}
        replies = self.db.execute(
            select(Comment)
            .where(Comment.parent_id.in_(threads.keys()))
            .order_by(Comment.created_at.asc())
        ).scalars()
        for reply in replies:
            threads[reply.parent_id].replies.append(reply)
        return list(threads.values())
