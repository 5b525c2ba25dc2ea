"""SQLAlchemy models for text posts."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rap_arena.db.ids import new_id
from rap_arena.db.session import Base
from rap_arena.db.time import utcnow


class Post(Base):
    """Text update published on a user's feed."""

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="ck_post_likes_count"),
        CheckConstraint("comments_count >= 0", name="ck_post_comments_count"),
        Index("ix_post_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Denormalized counters; reconciled from the join tables on demand.
    likes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
