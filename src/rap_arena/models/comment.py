"""SQLAlchemy models for comments on posts and recordings."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rap_arena.db.ids import new_id
from rap_arena.db.session import Base
from rap_arena.db.time import utcnow


class Comment(Base):
    """Comment attached to exactly one post or recording.

    Replies point at their parent through `parent_id` and inherit the
    parent's target.
    """

    __tablename__ = "comment"
    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="ck_comment_likes_count"),
        CheckConstraint(
            "(post_id IS NULL) <> (recording_id IS NULL)",
            name="ck_comment_single_target",
        ),
        Index("ix_comment_post_id", "post_id"),
        Index("ix_comment_recording_id", "recording_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    post_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=True,
    )
    recording_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("recording.id", ondelete="CASCADE"),
        nullable=True,
    )
    parent_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("comment.id", ondelete="CASCADE"),
        nullable=True,
    )

    likes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
