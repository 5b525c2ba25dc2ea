"""SQLAlchemy model for the follower graph."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from rap_arena.db.session import Base
from rap_arena.db.time import utcnow


class Follow(Base):
    """Directed edge: `follower_id` follows `following_id`."""

    __tablename__ = "follow"
    __table_args__ = (
        CheckConstraint("follower_id <> following_id", name="ck_follow_not_self"),
        Index("ix_follow_following_id", "following_id"),
    )

    follower_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    following_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
